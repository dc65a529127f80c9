from neodictate.cli import app

app(prog_name="neodictate")
