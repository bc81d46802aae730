"""
Example: indexing and reading back polymorphic student documents.

Runs against a local Elasticsearch-compatible server on localhost:9200.
Bodies are stored without a type discriminator; the label for each read
comes from the caller.
"""

from polydoc.config import load_config
from polydoc.documents.student import Student, StudentDev
from polydoc.wiring.index_wiring import build_index_client

config = load_config(
    config_dict={
        "log_level": "DEBUG",
        "index": {
            "base_url": "http://localhost:9200",
            "default_index": "polystudent",
        },
    }
)


# =============================================================================
# Index one base document and one variant
# =============================================================================
with build_index_client(config) as client:
    client.delete(1)
    client.delete(2)

    resp0 = client.index(Student(id=1, name="Name1", size=1, data_encoded="dlskfndlksfnkldsnfkl="))
    resp1 = client.index(
        StudentDev(id=2, name="Name2", size=2, data_encoded="dlskfndlksfnkldsnfkl=", university="home")
    )
    print(f"Indexed: {resp0.id} created={resp0.created}, {resp1.id} created={resp1.created}")

    # Make the writes visible to search
    client.refresh()

    # =========================================================================
    # Read back: the caller knows which label each id was written with
    # =========================================================================
    res0 = client.get(1, "Student")
    res1 = client.get(2, "StudentDev")
    print(f"Get 1: found={res0.found} -> {res0.document!r}")
    print(f"Get 2: found={res1.found} -> {res1.document!r}")

    labels = {"1": "Student", "2": "StudentDev"}
    response = client.search("Student", from_=0, size=2, label_for_hit=lambda hit: labels[hit["_id"]])
    print(f"Search: total={response.total}")
    for document in response.documents:
        print(f"   {type(document).__name__}: {document!r}")
