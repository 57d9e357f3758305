from minisup.cli import main

main()
