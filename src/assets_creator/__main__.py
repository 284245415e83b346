from assets_creator.cli import run

run()
