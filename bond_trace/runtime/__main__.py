from bond_trace.runtime.entrypoint import main

main()
