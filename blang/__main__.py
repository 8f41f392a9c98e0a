from blang.main import main


main()
