from thoughts._cli import main

main()
