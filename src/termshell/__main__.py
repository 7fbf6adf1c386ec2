from termshell.cli import main

main()
