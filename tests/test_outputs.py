import asyncio
import json

from artifact_viewers.errors import StorageError
from artifact_viewers.outputs import (
    MetadataDocumentLoader,
    OutputArtifactResolver,
    load_output_viewers,
)
from artifact_viewers.viewers import (
    MarkdownViewerConfig,
    PagedTableConfig,
    TensorboardViewerConfig,
)

METADATA_PATH = "gs://bucket/run/metadata.json"


def _document(*outputs) -> str:
    return json.dumps({"outputs": list(outputs)})


def test_loader_missing_document_is_empty(make_reader, reporter) -> None:
    loader = MetadataDocumentLoader(make_reader({}), reporter=reporter)

    assert asyncio.run(loader.load(METADATA_PATH)) == []
    assert reporter.by_severity("error")[0].startswith("Error loading run outputs")


def test_loader_empty_content_is_empty(make_reader, reporter) -> None:
    loader = MetadataDocumentLoader(
        make_reader({"bucket/run/metadata.json": ""}), reporter=reporter
    )

    assert asyncio.run(loader.load(METADATA_PATH)) == []
    assert reporter.messages == []


def test_loader_read_failure_is_reported(make_reader, reporter) -> None:
    reader = make_reader({"bucket/run/metadata.json": StorageError("boom", user_message="bucket offline")})
    loader = MetadataDocumentLoader(reader, reporter=reporter)

    assert asyncio.run(loader.load(METADATA_PATH)) == []
    assert reporter.by_severity("error") == ["Error loading run outputs: bucket offline"]


def test_loader_malformed_document_is_reported(make_reader, reporter) -> None:
    reader = make_reader({"bucket/run/metadata.json": '{"something": []}'})
    loader = MetadataDocumentLoader(reader, reporter=reporter)

    assert asyncio.run(loader.load(METADATA_PATH)) == []
    [message] = reporter.by_severity("error")
    assert message.startswith("Could not parse metadata file at: run/metadata.json.")
    assert '"outputs" field required' in message


def test_loader_invalid_json_is_reported(make_reader, reporter) -> None:
    reader = make_reader({"bucket/run/metadata.json": "{not json"})
    loader = MetadataDocumentLoader(reader, reporter=reporter)

    assert asyncio.run(loader.load(METADATA_PATH)) == []
    assert len(reporter.by_severity("error")) == 1


def test_loader_unsupported_locator_is_reported(make_reader, reporter) -> None:
    loader = MetadataDocumentLoader(make_reader({}), reporter=reporter)

    assert asyncio.run(loader.load("file:///tmp/metadata.json")) == []
    assert "Unsupported storage path" in reporter.by_severity("error")[0]


def test_resolver_keeps_order_and_drops_failures(make_reader, reporter) -> None:
    reader = make_reader(
        {
            "bucket/run/metadata.json": _document(
                {"type": "markdown", "storage": "inline", "source": "first"},
                {"type": "bogus", "source": "gs://bucket/x"},
                {"type": "table", "header": ["a", "b"], "format": "csv", "source": "gs://x/y.csv"},
                {"type": "table", "format": "csv", "source": "gs://x/y.csv"},
                {"type": "tensorboard", "source": "gs://bucket/logs"},
            ),
            "x/y.csv": "1,2\n3,4",
        }
    )
    resolver = OutputArtifactResolver(reader, reporter=reporter)

    viewers = asyncio.run(resolver.load(METADATA_PATH))

    assert [type(viewer) for viewer in viewers] == [
        MarkdownViewerConfig,
        PagedTableConfig,
        TensorboardViewerConfig,
    ]
    assert viewers[1].data == (("1", "2"), ("3", "4"))
    errors = reporter.by_severity("error")
    assert len(errors) == 2
    assert any("output 1" in message and "Unknown plot type: bogus" in message for message in errors)
    assert any("output 3" in message and '"header" is required' in message for message in errors)


def test_resolver_record_fetch_failure_is_isolated(make_reader, reporter) -> None:
    reader = make_reader(
        {
            "bucket/run/metadata.json": _document(
                {"type": "web-app", "source": "gs://bucket/missing.html"},
                {"type": "web-app", "source": "gs://bucket/index.html"},
            ),
            "bucket/index.html": "<p>ok</p>",
        }
    )

    viewers = asyncio.run(load_output_viewers(METADATA_PATH, reader, reporter=reporter))

    assert [viewer.html_content for viewer in viewers] == ["<p>ok</p>"]
    assert len(reporter.by_severity("error")) == 1


def test_resolver_is_idempotent(make_reader, reporter) -> None:
    reader = make_reader(
        {
            "bucket/run/metadata.json": _document(
                {"type": "table", "header": ["a", "b"], "format": "csv", "source": "gs://x/y.csv"},
                {
                    "type": "roc",
                    "source": "gs://x/roc.csv",
                    "schema": [{"name": "fpr"}, {"name": "tpr"}, {"name": "threshold"}],
                },
            ),
            "x/y.csv": "1,2\n3,4",
            "x/roc.csv": "0.1,0.9,0.5",
        }
    )
    resolver = OutputArtifactResolver(reader, reporter=reporter)

    first = asyncio.run(resolver.load(METADATA_PATH))
    second = asyncio.run(resolver.load(METADATA_PATH))

    assert first == second
    assert [viewer.to_dict() for viewer in first] == [viewer.to_dict() for viewer in second]


def test_resolver_drops_non_object_entries(make_reader, reporter) -> None:
    reader = make_reader(
        {
            "bucket/run/metadata.json": _document(
                {"type": "markdown", "storage": "inline", "source": "first"},
                None,
                "table",
                {"type": "markdown", "storage": "inline", "source": "last"},
            ),
        }
    )

    viewers = asyncio.run(load_output_viewers(METADATA_PATH, reader, reporter=reporter))

    assert [viewer.markdown_content for viewer in viewers] == ["first", "last"]
    errors = reporter.by_severity("error")
    assert len(errors) == 2
    assert any("output 1" in message for message in errors)
    assert any("output 2" in message for message in errors)
    assert not any("Could not parse metadata file" in message for message in errors)
