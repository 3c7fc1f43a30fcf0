import typer
from pydantic.dataclasses import dataclass

import sqlshape

DB_URL = "sqlite:///contacts.db"

app = typer.Typer()


@dataclass
class Contact:
    id: int
    name: str
    phone: str


def _ensure_schema():
    sqlshape.db.execute_rows(
        "CREATE TABLE IF NOT EXISTS contacts"
        " (id INTEGER PRIMARY KEY, name TEXT NOT NULL, phone TEXT NOT NULL)"
    )


@app.command()
def add(name: str, phone: str):
    """Add a contact."""
    sqlshape.db.execute_rows(
        "INSERT INTO contacts (name, phone) VALUES (?, ?)", (name, phone)
    )
    print(f"  Added [{sqlshape.db.last_insert_id()}] {name}")


@app.command("list")
def list_contacts():
    """List all contacts."""
    contacts = sqlshape.db.query_all(
        "SELECT id, name, phone FROM contacts ORDER BY name", into=Contact
    )
    for contact in contacts:
        print(f"  [{contact.id}] {contact.name}: {contact.phone}")
    print(f"  {sqlshape.db.query_count('SELECT id FROM contacts')} contact(s)")


@app.command()
def find(name: str):
    """Find a contact by exact name."""
    contact = sqlshape.db.query_one(
        "SELECT id, name, phone FROM contacts WHERE name = ?", (name,), Contact
    )
    if contact:
        print(f"  [{contact.id}] {contact.name}: {contact.phone}")
    else:
        print(f"  No contact named '{name}'")


@app.command()
def phonebook():
    """Print name -> phone pairs."""
    for name, phone in sqlshape.db.query_key_pair(
        "SELECT name, phone FROM contacts ORDER BY name"
    ).items():
        print(f"  {name}: {phone}")


@app.command()
def delete(id: int):
    """Delete a contact by ID."""
    deleted = sqlshape.db.execute_rows("DELETE FROM contacts WHERE id = ?", (id,))
    print(f"  Deleted: {deleted}")


@app.callback(invoke_without_command=True)
def main(ctx: typer.Context):
    database = sqlshape.Database.connect(DB_URL)
    ctx.call_on_close(database.close)
    _ensure_schema()

    if ctx.invoked_subcommand is None:
        list_contacts()


if __name__ == "__main__":
    app()
