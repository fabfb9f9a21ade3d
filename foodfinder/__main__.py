from foodfinder.cli import main

main()
