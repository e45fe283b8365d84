"""Keys command implementation"""

from rich.console import Console
from rich.markup import escape
from rich.table import Table

from certgen.option.loader import DEFAULT_ENV_PREFIX, env_var_name
from certgen.option.schema import key_owner, known_keys


class KeysCommand:
    """List every recognized configuration key"""

    def __init__(self, console: Console, env_prefix: str = DEFAULT_ENV_PREFIX):
        self.console = console
        self.env_prefix = env_prefix

    def execute(self):
        table = Table(title="Configuration Keys")
        table.add_column("Key", style="cyan", no_wrap=True)
        table.add_column("Type")
        table.add_column("Slot")
        table.add_column("Environment Variable", style="dim", no_wrap=True)

        for key, key_type in known_keys().items():
            table.add_row(key, key_type.value, key_owner(key), escape(env_var_name(key, self.env_prefix)))

        self.console.print(table)
