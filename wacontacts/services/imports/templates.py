"""
Fixed CSV templates: the downloadable sample and the contacts export.
"""
import csv
import io
from typing import List

from wacontacts.schemas.contact import ExportedContact
from wacontacts.services.imports.normalizer import TAG_SEPARATOR

SAMPLE_FILENAME = "contacts_sample.csv"

SAMPLE_CSV = (
    "Name,Phone,Email,Tags\n"
    "John Doe,919876543210,john@example.com,customer;vip\n"
    "Jane Smith,918765432109,jane@example.com,customer\n"
    "Bob Wilson,917654321098,bob@example.com,lead"
)

EXPORT_COLUMNS = ["Name", "Phone", "Email", "Tags"]


def export_contacts_csv(contacts: List[ExportedContact]) -> str:
    """
    Render contacts as CSV with every data cell quoted.

    Tags are joined with ';' so the file can be imported again. Embedded
    double quotes are written doubled (""), which the import parser does not
    unescape, so such values do not survive a round trip unchanged.
    """
    output = io.StringIO()
    csv.writer(output, lineterminator="\n").writerow(EXPORT_COLUMNS)
    writer = csv.writer(output, quoting=csv.QUOTE_ALL, lineterminator="\n")
    for c in contacts:
        writer.writerow([c.name, c.phone, c.email, TAG_SEPARATOR.join(c.tags)])
    return output.getvalue().rstrip("\n")


def export_filename(date_iso: str) -> str:
    return f"contacts_{date_iso}.csv"
