from homepage.server import run

run()
