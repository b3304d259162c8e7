from slacktail.cli import main

main(prog_name="slacktail")
