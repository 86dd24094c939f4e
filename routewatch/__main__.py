from routewatch.app import main

main()
