"""Tests for sourcing.query_compiler."""

import copy

import pytest

from helpers import SMALL_FRAGMENTS

from sourcing.entity_types import NACELLE_ENTITY_TYPES, PRODUCT, SPACE, EntityTypeSpec, QueryTemplate
from sourcing.errors import CompilationError
from sourcing.fragments import InMemoryFragments, read_or_generate_default_fragments
from sourcing.query_compiler import compile_entity_type, compile_node_queries, parse_fragments
from sourcing.schema import build_remote_schema


@pytest.fixture
def documents(schema, fragments):
    return compile_node_queries(schema, NACELLE_ENTITY_TYPES, fragments)


def _without_field(schema_data, type_name, field_name):
    data = copy.deepcopy(schema_data)
    for type_data in data["__schema"]["types"]:
        if type_data["name"] == type_name:
            type_data["fields"] = [f for f in type_data["fields"] if f["name"] != field_name]
    return build_remote_schema(data)


def test_compiles_every_registered_type(documents):
    assert set(documents) == {"Product", "Collection", "Space"}
    assert documents["Space"].listing is None
    assert documents["Product"].listing.operation_name == "LIST_PRODUCTS"
    assert documents["Collection"].lookup.operation_name == "NODE_COLLECTION"


def test_documents_are_read_only(documents):
    with pytest.raises(TypeError):
        documents["Product"] = None


def test_listing_document(documents):
    listing = documents["Product"].listing
    doc = listing.document
    assert doc.startswith("query LIST_PRODUCTS($first: Int, $after: String) {")
    assert "getProducts(first: $first, after: $after) {" in doc
    assert "nextToken" in doc
    assert "..._ProductId_" in doc
    assert "...Product\n" in doc
    assert "fragment _ProductId_ on Product {\n  __typename\n  handle\n  locale\n}" in doc
    assert "fragment Product on Product {\n  id\n  handle\n  locale\n  title\n}" in doc
    assert listing.root_field == "getProducts"
    assert listing.variable_names == ("first", "after")


def test_lookup_document(documents):
    doc = documents["Product"].lookup.document
    assert doc.startswith("query NODE_PRODUCT($handle: String!, $locale: String) {")
    assert "getProductByHandle(handle: $handle, locale: $locale) {" in doc


def test_singleton_lookup_has_no_variables(documents):
    lookup = documents["Space"].lookup
    assert lookup.document.startswith("query NODE_SPACE {\n  getSpace {")
    assert "fragment _SpaceId_ on Space {\n  __typename\n  id\n}" in lookup.document
    assert lookup.variable_names == ()


def test_compiles_generated_default_fragments(schema, tmp_path):
    fragments = read_or_generate_default_fragments(str(tmp_path), schema, ["Product", "Collection", "Space"])
    documents = compile_node_queries(schema, NACELLE_ENTITY_TYPES, fragments)
    assert "featuredMedia {" in documents["Product"].listing.document


def test_unknown_fragment_field(schema):
    with pytest.raises(CompilationError, match="Cannot query field 'color' on type 'Product'"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { handle color }")


def test_object_field_needs_selection(schema):
    with pytest.raises(CompilationError, match="must have a selection of subfields"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { featuredMedia }")


def test_leaf_field_rejects_selection(schema):
    with pytest.raises(CompilationError, match="must not have a selection"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { title { x } }")


def test_nested_unknown_field(schema):
    with pytest.raises(CompilationError, match="'width' on type 'Media'"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { featuredMedia { src width } }")


def test_unknown_fragment_type(schema):
    with pytest.raises(CompilationError, match="Unknown type 'Widget'"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Widget { id }")


def test_missing_fragment_on_type(schema):
    with pytest.raises(CompilationError, match="No fragment on type 'Product'"):
        compile_entity_type(schema, PRODUCT, "fragment Media on Media { src }")


def test_unknown_spread(schema):
    with pytest.raises(CompilationError, match="Unknown fragment 'Extra'"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { ...Extra }")


def test_spread_of_helper_fragment(schema):
    text = (
        "fragment Product on Product { handle featuredMedia { ...MediaFields } }\n"
        "fragment MediaFields on Media { src type }"
    )
    compiled = compile_entity_type(schema, PRODUCT, text)
    assert "fragment MediaFields on Media {\n  src\n  type\n}" in compiled.listing.document


def test_duplicate_fragment_name(schema):
    with pytest.raises(CompilationError, match="only one fragment named '_ProductId_'"):
        compile_entity_type(schema, PRODUCT, "fragment _ProductId_ on Product { id }\nfragment Product on Product { id }")


def test_unknown_root_field(schema):
    renamed = EntityTypeSpec(
        remote_type_name="Product",
        list_query=QueryTemplate("LIST_PRODUCTS", "allProducts", ("first", "after")),
        lookup_query=PRODUCT.lookup_query,
    )
    with pytest.raises(CompilationError, match="Cannot query field 'allProducts' on type 'Query'"):
        compile_entity_type(schema, renamed, SMALL_FRAGMENTS["Product"])


def test_unknown_argument(schema):
    bad = EntityTypeSpec(
        remote_type_name="Product",
        list_query=QueryTemplate("LIST_PRODUCTS", "getProducts", ("first", "cursor")),
        lookup_query=PRODUCT.lookup_query,
    )
    with pytest.raises(CompilationError, match="does not accept argument 'cursor'"):
        compile_entity_type(schema, bad, SMALL_FRAGMENTS["Product"])


def test_listing_without_page_shape(schema_data):
    schema = _without_field(schema_data, "ProductConnection", "nextToken")
    with pytest.raises(CompilationError, match="no 'nextToken' field"):
        compile_entity_type(schema, PRODUCT, SMALL_FRAGMENTS["Product"])


def test_identity_field_missing_from_schema(schema_data):
    schema = _without_field(schema_data, "Space", "id")
    with pytest.raises(CompilationError, match="'id' on type 'Space'"):
        compile_entity_type(schema, SPACE, "fragment Space on Space { name }")


def test_unknown_entity_type(schema):
    ghost = EntityTypeSpec("Ghost", lookup_query=QueryTemplate("NODE_GHOST", "getGhost"))
    with pytest.raises(CompilationError, match="Unknown type 'Ghost'"):
        compile_node_queries(schema, [ghost], InMemoryFragments({"Ghost": "fragment Ghost on Ghost { id }"}))


def test_aliases_arguments_and_directives_compile(schema):
    text = """
    # product fields
    fragment Product on Product {
      name: title
      metafield(key: "size") @include(if: true)
      featuredMedia { src }
      ... on Product { handle }
    }
    """
    doc = compile_entity_type(schema, PRODUCT, text).listing.document
    assert "name: title" in doc
    assert 'metafield(key: "size") @include(if: true)' in doc
    assert "... on Product {" in doc


def test_unknown_argument_in_fragment(schema):
    with pytest.raises(CompilationError, match="Unknown argument 'bogus' on field 'Product.title'"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { handle title(bogus: 1) }")


def test_missing_required_argument(schema):
    with pytest.raises(CompilationError, match="argument 'key' of type 'String!' is required"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product { handle metafield }")


def test_spread_onto_wrong_type(schema):
    text = "fragment Product on Product { handle ...C }\nfragment C on Collection { title }"
    with pytest.raises(CompilationError, match="Fragment 'C' cannot be spread here"):
        compile_entity_type(schema, PRODUCT, text)


def test_directive_in_wrong_location(schema):
    with pytest.raises(CompilationError, match="may not be used on FRAGMENT_DEFINITION"):
        compile_entity_type(schema, PRODUCT, 'fragment Product on Product @deprecated(reason: "x") { id }')


def test_unused_helper_fragment(schema):
    text = "fragment Product on Product { id }\nfragment Unused on Media { src }"
    with pytest.raises(CompilationError, match="Fragment 'Unused' is never used"):
        compile_entity_type(schema, PRODUCT, text)


def test_empty_selection_set(schema):
    with pytest.raises(CompilationError, match="Syntax Error"):
        compile_entity_type(schema, PRODUCT, "fragment Product on Product {\n}")


def test_parse_fragments():
    document = parse_fragments("fragment Product on Product { id }\nfragment Media on Media { src }")
    assert [d.name.value for d in document.definitions] == ["Product", "Media"]
    assert [d.type_condition.name.value for d in document.definitions] == ["Product", "Media"]


def test_parse_fragments_rejects_non_fragment():
    with pytest.raises(CompilationError, match="Expected a fragment definition"):
        parse_fragments("query X { y }")


def test_parse_fragments_unterminated():
    with pytest.raises(CompilationError, match="Syntax Error"):
        parse_fragments("fragment Product on Product { id")
