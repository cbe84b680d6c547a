from mandelbrot_raster.cli.main import main

main()
