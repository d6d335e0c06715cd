# test_xml_patch_properties.py
#
# Property-based tests for the registry patch passes using Hypothesis.
# Documents are generated from random record sets, then patched and decoded
# again to check that only the intended entries change.
#
# Imports
import random
#
# Third-Party Imports
from hypothesis import HealthCheck, given, settings, strategies as st
#
# Local Imports
from freemind_cli.Constants import MAX_DUE_TIMESTAMP, MAX_ENTRY_ID
from freemind_cli.Registry.Entry_Record import Record
from freemind_cli.Registry.Local_State import LocalStateStore
from freemind_cli.Registry.XML_Patch import (
    decode_registry, delete_removed, insert_created_entries, serialize_entry,
)
#
#######################################################################################################################
#
# --- Hypothesis Settings ---

settings.register_profile(
    "xml_patch_suite",
    deadline=2000,
    suppress_health_check=[HealthCheck.too_slow, HealthCheck.data_too_large],
)
settings.load_profile("xml_patch_suite")


# --- Hypothesis Strategies ---

# XML 1.0 cannot carry control characters, surrogates or non-characters;
# the delete pass trims text, so generated text carries no outer whitespace.
xml_text = st.text(
    alphabet=st.characters(blacklist_categories=("Cc", "Cs", "Cn")),
    max_size=30,
).filter(lambda value: value == value.strip())


@st.composite
def registries(draw):
    ids = draw(st.lists(st.integers(min_value=1, max_value=MAX_ENTRY_ID), unique=True, max_size=12))
    records = [
        Record(
            id=entry_id,
            title=draw(xml_text),
            description=draw(xml_text),
            due=draw(st.none() | st.integers(min_value=0, max_value=MAX_DUE_TIMESTAMP)),
        )
        for entry_id in ids
    ]
    removed = draw(st.sets(st.sampled_from(ids))) if ids else set()
    return records, removed


def build_document(records):
    return "<registry>" + "".join(serialize_entry(record) for record in records) + "</registry>"


def as_tuples(records):
    return [(r.id, r.title, r.description, r.due) for r in records]


# --- Properties ---

@given(registries())
def test_serialized_registry_decodes_to_the_same_records(data):
    records, _ = data
    assert as_tuples(decode_registry(build_document(records))) == as_tuples(records)


@given(registries())
def test_delete_removed_drops_exactly_the_tombstoned_entries(data):
    records, removed = data
    store = LocalStateStore([record.model_copy() for record in records])
    for entry_id in removed:
        store.remove(entry_id)

    changed, document = delete_removed(build_document(records), store)

    assert changed == bool(removed)
    kept = [record for record in records if record.id not in removed]
    assert as_tuples(decode_registry(document)) == as_tuples(kept)
    assert store.get_ids(include_removed=True) == {record.id for record in kept}


@given(registries(), st.lists(xml_text, min_size=1, max_size=5), st.integers(min_value=0, max_value=2 ** 32))
def test_inserted_entries_come_first_and_keep_the_rest(data, titles, seed):
    records, _ = data
    store = LocalStateStore([Record(title=title) for title in titles])
    existing = {record.id for record in records}

    new_ids = store.assign_missing_ids(existing, random.Random(seed))
    document = insert_created_entries(build_document(records), store, new_ids)

    decoded = decode_registry(document)
    assert [record.id for record in decoded[:len(new_ids)]] == new_ids
    assert [record.title for record in decoded[:len(new_ids)]] == titles
    assert as_tuples(decoded[len(new_ids):]) == as_tuples(records)

#
# End of test_xml_patch_properties.py
#######################################################################################################################
