import __about__


def test_metadata_summary_fields():
    meta = __about__.metadata_summary()
    assert meta["title"] == "Tessera"
    assert meta["version"] == __about__.__version__
    assert meta["license"] == "LGPL-3.0-or-later"
