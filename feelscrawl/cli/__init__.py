"""CLI entry point for feelscrawl."""

import rich_click as click

from .. import __version__

# Import command modules; avoid shadowing module names with command objects
# so that `import feelscrawl.cli.<module>` still resolves to the module.
from . import accounts as _accounts_mod
from . import config_cmd as _config_mod
from . import crawl_cmd as _crawl_mod
from . import db_cmd as _db_mod
from . import init_cmd as _init_mod
from . import models_cmd as _models_mod
from . import reanalyze as _reanalyze_mod
from . import runs_cmd as _runs_mod


@click.group()
@click.version_option(version=__version__)
def cli():
    """Incremental X/Twitter crawler feeding a sentiment-analysis queue."""
    pass


# Register commands
cli.add_command(_init_mod.init)
cli.add_command(_init_mod.doctor)
cli.add_command(_crawl_mod.run)
cli.add_command(_crawl_mod.crawl)
cli.add_command(_accounts_mod.accounts)
cli.add_command(_models_mod.models)
cli.add_command(_reanalyze_mod.reanalyze)
cli.add_command(_runs_mod.runs)
cli.add_command(_runs_mod.errors)
cli.add_command(_runs_mod.queue)
cli.add_command(_config_mod.config)
cli.add_command(_db_mod.db)


if __name__ == "__main__":
    cli()
