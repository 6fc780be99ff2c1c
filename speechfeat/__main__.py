from speechfeat.cli import main

main()
