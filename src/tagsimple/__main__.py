from tagsimple.cli import main

main()
