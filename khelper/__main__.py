from khelper.main import run

run()
