from pastewatch.main import run

run()
