from rich.console import Console
from rich.markup import escape
from rich.traceback import install

# stderr only: stdout is reserved for --stdout payloads
console = Console(stderr=True)
install(show_locals=False)

def info(msg): console.log(f"[bold cyan]INFO[/] {escape(str(msg))}", highlight=False)
def warn(msg): console.log(f"[bold yellow]WARN[/] {escape(str(msg))}", highlight=False)
def err(msg):  console.log(f"[bold red]ERR[/] {escape(str(msg))}", highlight=False)
