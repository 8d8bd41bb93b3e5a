"""CLI constants and configuration."""

from prompt_toolkit.styles import Style

COMMANDS = ["upload", "download", "delete", "list", "fail", "recover", "nodes", "clear", "help", "exit"]

NODE_COMMANDS = ("fail", "recover")
STORED_FILE_COMMANDS = ("download", "delete")

STYLE = Style.from_dict(
    {
        "prompt": "#2E9AFE bold",
        "command": "#0088ff bold",
    }
)

BLUE = "\033[38;2;46;154;254m"
GREEN = "\033[32m"
YELLOW = "\033[33m"
RED = "\033[31m"
RESET = "\033[0m"

LOGO = f"""{BLUE}
 ____  _____ ____  _     ___ ____    _           _____ ____
|  _ \\| ____|  _ \\| |   |_ _/ ___|  / \\         |  ___/ ___|
| |_) |  _| | |_) | |    | | |     / _ \\  _____ | |_  \\___ \\
|  _ <| |___|  __/| |___ | | |___ / ___ \\|_____||  _|  ___) |
|_| \\_\\_____|_|   |_____|___\\____/_/   \\_\\      |_|   |____/
{RESET}"""

WELCOME_TITLE = "=== DISTRIBUTED FILE SYSTEM ==="
WELCOME_HELP = (
    "Commands: upload <file>, download <file>, delete <file>, list, "
    "fail <id>, recover <id>, nodes, exit\n"
)

PROMPT_TEXT = "DFS> "

HELP_TEXT = """Available commands:
  upload <file>                 Replicate a local file onto 3 active nodes
  download <file> [output]      Fetch a file from the first live replica
                                (written to downloaded_<file> unless output is given)
  delete <file>                 Remove a file from all active nodes and the metadata
  list                          List stored files and the nodes holding them
  fail <id>                     Simulate failure of node <id> (runs a health check)
  recover <id>                  Bring node <id> back (runs a health check)
  nodes                         Show node status
  clear                         Clear screen and redisplay welcome message
  help                          Show this help
  exit                          Exit REPL

upload and delete take the rest of the line as the filename; download needs
quotes for names with spaces: download "my notes.txt" copy.txt
Examples:
  upload report.txt
  fail 2
  download report.txt
  download report.txt copies/report.txt
  recover 2"""
