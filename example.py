"""Example usage of the typed_csv library."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from typed_csv import Uint8, csv_field, read_csv, write_csv

# Define a record type as a dataclass
@dataclass
class Person:
    name: str = ""
    age: Uint8 = 0
    height: float = 0.0
    email: Optional[str] = csv_field("E-mail", default=None)
    active: bool = True
    password: str = csv_field(exclude=True, default="")


people = [
    Person("Alice", 30, 1.68, "alice@example.com"),
    Person("Bob", 25, 1.82, None, active=False),
    Person("Charlie", 35, 1.75, "charlie@example.com", password="hunter2"),
]

path = Path("./example_people.csv")

# Write the records, header first
with open(path, "w", newline="") as f:
    write_csv(f, people)

print(f"Wrote {path}:")
print(path.read_text())

# Read them back into typed records
with open(path, newline="") as f:
    loaded = read_csv(f, Person)

print("Loaded records:")
for person in loaded:
    print(f"  {person}")
