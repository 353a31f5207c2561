"""
Tests for the buf image schema coverage helpers
"""

# Third Party
from google.protobuf import descriptor_pb2
import pytest

# Local
from jsonschema_postgen.descriptor_names import (
    expected_schema_filenames,
    find_missing_schemas,
    iter_message_full_names,
    load_image,
)
from jsonschema_postgen.errors import MalformedInputError, SchemaReadError

## Helpers #####################################################################


@pytest.fixture
def sample_image():
    """A FileDescriptorSet with two packages and a nested message"""
    return descriptor_pb2.FileDescriptorSet(
        file=[
            descriptor_pb2.FileDescriptorProto(
                name="skiff/registry/v1/manifest.proto",
                package="skiff.registry.v1",
                syntax="proto3",
                message_type=[
                    descriptor_pb2.DescriptorProto(
                        name="PluginManifest",
                        nested_type=[descriptor_pb2.DescriptorProto(name="Inner")],
                    ),
                    descriptor_pb2.DescriptorProto(name="Version"),
                ],
            ),
            descriptor_pb2.FileDescriptorProto(
                name="skiff/plugin/v1/plugin.proto",
                package="skiff.plugin.v1",
                syntax="proto3",
                message_type=[descriptor_pb2.DescriptorProto(name="HTTPRequest")],
            ),
        ]
    )


## Tests #######################################################################


def test_iter_message_full_names(sample_image):
    """Make sure only top-level messages are listed with their package"""
    assert list(iter_message_full_names(sample_image)) == [
        "skiff.registry.v1.PluginManifest",
        "skiff.registry.v1.Version",
        "skiff.plugin.v1.HTTPRequest",
    ]


def test_iter_message_full_names_no_package():
    """Make sure messages without a package use the bare name"""
    fds = descriptor_pb2.FileDescriptorSet(
        file=[
            descriptor_pb2.FileDescriptorProto(
                name="bare.proto",
                message_type=[descriptor_pb2.DescriptorProto(name="Bare")],
            )
        ]
    )
    assert list(iter_message_full_names(fds)) == ["Bare"]


def test_expected_schema_filenames(sample_image):
    """Make sure the expected names follow the rename convention"""
    assert expected_schema_filenames(sample_image) == [
        "skiff.plugin.v1.h-t-t-p-request.json",
        "skiff.registry.v1.plugin-manifest.json",
        "skiff.registry.v1.version.json",
    ]


def test_find_missing_schemas(sample_image, tmp_path):
    """Make sure only the schemas without a file are reported"""
    (tmp_path / "skiff.registry.v1.plugin-manifest.json").write_text("{}")
    (tmp_path / "skiff.registry.v1.version.json").write_text("{}")
    assert find_missing_schemas(sample_image, str(tmp_path)) == [
        "skiff.plugin.v1.h-t-t-p-request.json"
    ]


def test_find_missing_schemas_no_dir(sample_image, tmp_path):
    """Make sure a missing directory reports every schema"""
    assert len(find_missing_schemas(sample_image, str(tmp_path / "nope"))) == 3


def test_load_image(sample_image, tmp_path):
    """Make sure a serialized image is read back"""
    image_path = tmp_path / "image.binpb"
    image_path.write_bytes(sample_image.SerializeToString())
    assert load_image(str(image_path)) == sample_image


def test_load_image_missing(tmp_path):
    """Make sure a missing image is a read error"""
    with pytest.raises(SchemaReadError):
        load_image(str(tmp_path / "missing.binpb"))


def test_load_image_garbage(tmp_path):
    """Make sure bytes that are not a descriptor set are malformed input"""
    image_path = tmp_path / "image.binpb"
    image_path.write_bytes(b"\xff\xff\xff")
    with pytest.raises(MalformedInputError):
        load_image(str(image_path))


def test_well_known_types_are_skipped(tmp_path):
    """Make sure imported well-known types never count as missing schemas"""
    fds = descriptor_pb2.FileDescriptorSet(
        file=[
            descriptor_pb2.FileDescriptorProto(
                name="google/protobuf/timestamp.proto",
                package="google.protobuf",
                message_type=[descriptor_pb2.DescriptorProto(name="Timestamp")],
            ),
            descriptor_pb2.FileDescriptorProto(
                name="skiff/registry/v1/manifest.proto",
                package="skiff.registry.v1",
                dependency=["google/protobuf/timestamp.proto"],
                message_type=[descriptor_pb2.DescriptorProto(name="Version")],
            ),
        ]
    )
    (tmp_path / "skiff.registry.v1.version.json").write_text("{}")
    assert list(iter_message_full_names(fds)) == ["skiff.registry.v1.Version"]
    assert find_missing_schemas(fds, str(tmp_path)) == []
