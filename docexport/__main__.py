from docexport.main import run

run()
