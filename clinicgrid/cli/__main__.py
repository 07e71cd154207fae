from clinicgrid.cli import main

main()
