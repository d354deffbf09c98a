"""Administrative commands.

Authors have no self-service sign-up; create them here:

    python -m partyhub.manage create-author "Alice"
    python -m partyhub.manage list-authors
"""

import argparse
import sys

from sqlmodel import Session, select

from partyhub.database import engine, init_db
from partyhub.models.author import Author
from partyhub.utils.security import generate_author_secret


def create_author(name: str) -> Author:
    with Session(engine) as session:
        author = Author(name=name, author_secret=generate_author_secret())
        session.add(author)
        session.commit()
        session.refresh(author)
        return author


def list_authors() -> list[Author]:
    with Session(engine) as session:
        return list(session.exec(select(Author)).all())


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(prog="partyhub.manage", description="Party Hub administration")
    sub = parser.add_subparsers(dest="command", required=True)

    create = sub.add_parser("create-author", help="create an author and print their secret")
    create.add_argument("name")
    sub.add_parser("list-authors", help="list author ids and names")

    args = parser.parse_args(argv)
    init_db()

    if args.command == "create-author":
        author = create_author(args.name)
        print(f"Created author {author.name} ({author.id})")
        print(f"Secret: {author.author_secret}")
    elif args.command == "list-authors":
        for author in list_authors():
            print(f"{author.id}  {author.name}")
    return 0


if __name__ == "__main__":
    sys.exit(main())
