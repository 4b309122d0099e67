from allfollow.cli import app

app(prog_name="allfollow")
