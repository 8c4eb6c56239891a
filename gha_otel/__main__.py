from gha_otel.cli import app

app(prog_name="gha-otel-export")
