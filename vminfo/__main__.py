from vminfo.main import app

app(prog_name="vminfo")
