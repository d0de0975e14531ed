from igniter.cli import main

main()
