from space_cli.cli.main import main

main()
