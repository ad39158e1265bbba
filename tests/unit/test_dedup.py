from ingestion.metadata import DeduplicationKey


class TestDeduplicationKey:
    def test_build_canonicalizes_fields(self) -> None:
        key = DeduplicationKey.build(
            source_url="  https://bip.drawno.pl/sesja-5  ",
            normalized_title="Sesja 5   Rady\nMiejskiej",
            document_type=" Protocol ",
        )
        assert key.source_url == "https://bip.drawno.pl/sesja-5"
        assert key.normalized_title == "sesja 5 rady miejskiej"
        assert key.document_type == "protocol"

    def test_blank_fields_become_none(self) -> None:
        key = DeduplicationKey.build(source_url=" ", normalized_title="", document_type=None)
        assert key == DeduplicationKey()

    def test_same_url_matches(self) -> None:
        a = DeduplicationKey.build(
            source_url="https://bip.drawno.pl/a", normalized_title="Sesja 1", document_type="protocol"
        )
        b = DeduplicationKey.build(
            source_url="https://bip.drawno.pl/a", normalized_title="Sesja 2", document_type="agenda"
        )
        assert a.matches(b)

    def test_title_and_type_match_across_urls(self) -> None:
        a = DeduplicationKey.build(
            source_url="https://bip.drawno.pl/a", normalized_title="Sesja 5 Rady", document_type="protocol"
        )
        b = DeduplicationKey.build(
            source_url="https://drawno.pl/b", normalized_title="SESJA 5 rady", document_type="Protocol"
        )
        assert a.matches(b)
        assert b.matches(a)

    def test_same_title_different_type_is_distinct(self) -> None:
        a = DeduplicationKey.build(source_url=None, normalized_title="Sesja 5", document_type="protocol")
        b = DeduplicationKey.build(source_url=None, normalized_title="Sesja 5", document_type="agenda")
        assert not a.matches(b)

    def test_title_without_type_never_matches(self) -> None:
        a = DeduplicationKey.build(source_url=None, normalized_title="Sesja 5", document_type=None)
        assert not a.matches(a)
