import click

from .commands.catalog import catalog_command, mapping_command
from .commands.transfer import export_command, fill_plan_command, import_command


@click.group()
def app() -> None:
    pass


app.add_command(catalog_command, name="catalog")
app.add_command(mapping_command, name="mapping")
app.add_command(import_command, name="import")
app.add_command(export_command, name="export")
app.add_command(fill_plan_command, name="fill-plan")
__all__ = ["app"]
