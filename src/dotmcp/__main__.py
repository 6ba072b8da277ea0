from dotmcp.cli import main

main()
