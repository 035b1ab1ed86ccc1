from vole.cli import main

main()
