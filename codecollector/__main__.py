from codecollector.cli.collect import main

if __name__ == '__main__':
    main()
