from skyscrapers import main

main()
