from transit_hub.server import main

main()
