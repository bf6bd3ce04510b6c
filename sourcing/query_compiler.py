"""
Query Compiler — Builds the executable sourcing documents for each entity type.

For every registered EntityTypeSpec the compiler combines the type's operation
templates, its identity fragment and its field fragment into two documents:

  Listing (multi-instance types only):

    query LIST_PRODUCTS($first: Int, $after: String) {
      getProducts(first: $first, after: $after) {
        nextToken
        items {
          ..._ProductId_
          ...Product
        }
      }
    }

    fragment _ProductId_ on Product {
      __typename
      handle
      locale
    }

    fragment Product on Product { ... }

  Lookup by natural key:

    query NODE_PRODUCT($handle: String!, $locale: String) {
      getProductByHandle(handle: $handle, locale: $locale) {
        ..._ProductId_
        ...Product
      }
    }
    ...same fragments...

Variable types are taken from the root field's arguments in the schema.

Documents are parsed and validated with graphql-core against the remote
schema, using the standard validation rules: unknown fields, types, arguments
and fragments, missing required arguments, missing or misplaced
sub-selections, and fragments spread onto a type they can never match all
fail compilation. Before that, the operation templates are checked for what
the sourcing engine relies on: the root field must exist and accept the
template's variables, and a listing field must return the {nextToken, items}
page shape with items of the entity type. Any mismatch raises
CompilationError before a single listing query is sent.

The result is a read-only mapping built once per run.

Pipeline context:
    Step 3 of the orchestrator. Input is the schema (Step 1) and the fragment
    provider (Step 2); output feeds the SourcingEngine and SingletonSourcer.
"""

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Optional, Sequence, Tuple

from graphql import (
    DocumentNode,
    FragmentDefinitionNode,
    GraphQLError,
    GraphQLSchema,
    NoUnusedFragmentsRule,
    get_named_type,
    is_object_type,
    parse,
    print_ast,
    specified_rules,
    validate,
)

from .entity_types import EntityTypeSpec, QueryTemplate
from .errors import CompilationError
from .fragments import FragmentProvider
from .schema import root_field

PAGE_FIELDS = ("items", "nextToken")

# Fragments are checked on their own before any operation spreads them.
FRAGMENT_RULES = tuple(rule for rule in specified_rules if rule is not NoUnusedFragmentsRule)


@dataclass(frozen=True)
class CompiledQuery:
    operation_name: str
    root_field: str
    variable_names: Tuple[str, ...]
    document: str


@dataclass(frozen=True)
class CompiledDocuments:
    """The compiled documents of one entity type.

    Attributes:
        remote_type_name: e.g. "Product".
        lookup: The NODE_ document.
        listing: The LIST_ document, or None for singleton types.
    """

    remote_type_name: str
    lookup: CompiledQuery
    listing: Optional[CompiledQuery] = None


def _parse(text: str, context: str) -> DocumentNode:
    try:
        return parse(text)
    except GraphQLError as e:
        raise CompilationError(f"{e.message} ({context})") from e


def _validate(
    schema: GraphQLSchema, document: DocumentNode, context: str, rules: Optional[Sequence] = None
) -> None:
    errors = validate(schema, document, rules)
    if errors:
        raise CompilationError(f"{'; '.join(error.message for error in errors)} ({context})")


def parse_fragments(text: str) -> DocumentNode:
    """Parse a fragment text that may only hold fragment definitions.

    Raises:
        CompilationError: On a syntax error or a non-fragment definition.
    """
    document = _parse(text, "fragment text")
    for definition in document.definitions:
        if not isinstance(definition, FragmentDefinitionNode):
            raise CompilationError(f"Expected a fragment definition, found {definition.kind}")
    return document


def _variable_definitions(schema: GraphQLSchema, template: QueryTemplate) -> str:
    root = root_field(schema, template.root_field)
    definitions = []
    for name in template.variable_names:
        if name not in root.args:
            raise CompilationError(
                f"Field '{template.root_field}' does not accept argument '{name}' "
                f"({template.operation_name})"
            )
        definitions.append(f"${name}: {root.args[name].type}")
    return f"({', '.join(definitions)})" if definitions else ""


def _field_call(template: QueryTemplate) -> str:
    if not template.variable_names:
        return template.root_field
    arguments = ", ".join(f"{name}: ${name}" for name in template.variable_names)
    return f"{template.root_field}({arguments})"


def _check_root_field(
    schema: GraphQLSchema, entity_type: EntityTypeSpec, template: QueryTemplate, paginated: bool
) -> None:
    root = root_field(schema, template.root_field)
    if root is None:
        raise CompilationError(
            f"Cannot query field '{template.root_field}' on type 'Query' ({template.operation_name})"
        )

    returned = get_named_type(root.type)
    if not paginated:
        if returned.name != entity_type.remote_type_name:
            raise CompilationError(
                f"Field '{template.root_field}' returns '{root.type}', "
                f"expected '{entity_type.remote_type_name}' ({template.operation_name})"
            )
        return

    page_fields = returned.fields if is_object_type(returned) else {}
    for page_field in PAGE_FIELDS:
        if page_field not in page_fields:
            raise CompilationError(
                f"Field '{template.root_field}' returns '{root.type}', which has no "
                f"'{page_field}' field ({template.operation_name})"
            )
    items_type = get_named_type(page_fields["items"].type).name
    if items_type != entity_type.remote_type_name:
        raise CompilationError(
            f"Field '{template.root_field}.items' returns '{items_type}', "
            f"expected '{entity_type.remote_type_name}' ({template.operation_name})"
        )


def _compile_operation(
    schema: GraphQLSchema,
    entity_type: EntityTypeSpec,
    template: QueryTemplate,
    spreads: str,
    fragments_text: str,
    paginated: bool,
) -> CompiledQuery:
    _check_root_field(schema, entity_type, template, paginated)

    selection = f"{{ nextToken items {{ {spreads} }} }}" if paginated else f"{{ {spreads} }}"
    text = (
        f"query {template.operation_name}{_variable_definitions(schema, template)} "
        f"{{ {_field_call(template)} {selection} }}\n"
        f"{fragments_text}"
    )
    document = _parse(text, template.operation_name)
    _validate(schema, document, template.operation_name)

    return CompiledQuery(
        operation_name=template.operation_name,
        root_field=template.root_field,
        variable_names=template.variable_names,
        document=print_ast(document),
    )


def compile_entity_type(
    schema: GraphQLSchema, entity_type: EntityTypeSpec, fragment_text: str
) -> CompiledDocuments:
    """Compile the listing and lookup documents of one entity type.

    Raises:
        CompilationError: If the templates or fragments do not match the schema.
    """
    type_name = entity_type.remote_type_name
    if schema.get_type(type_name) is None:
        raise CompilationError(f"Unknown type '{type_name}' in remote schema")

    fragments_text = entity_type.identity_fragment + "\n" + fragment_text.strip() + "\n"
    fragments = parse_fragments(fragments_text)
    _validate(schema, fragments, f"fragments of {type_name}", FRAGMENT_RULES)

    main_fragment = next(
        (
            definition.name.value
            for definition in fragments.definitions[1:]
            if definition.type_condition.name.value == type_name
        ),
        None,
    )
    if main_fragment is None:
        raise CompilationError(f"No fragment on type '{type_name}' was provided")

    spreads = f"...{entity_type.identity_fragment_name} ...{main_fragment}"

    listing = None
    if entity_type.list_query is not None:
        listing = _compile_operation(
            schema, entity_type, entity_type.list_query, spreads, fragments_text, paginated=True
        )
    lookup = _compile_operation(
        schema, entity_type, entity_type.lookup_query, spreads, fragments_text, paginated=False
    )
    return CompiledDocuments(remote_type_name=type_name, lookup=lookup, listing=listing)


def compile_node_queries(
    schema: GraphQLSchema, entity_types: Iterable[EntityTypeSpec], fragments: FragmentProvider
) -> Mapping[str, CompiledDocuments]:
    """Compile the documents of every registered entity type.

    Args:
        schema: The remote schema.
        entity_types: The registered types.
        fragments: Supplies each type's field fragment.

    Returns:
        A read-only mapping of remote type name -> CompiledDocuments.

    Raises:
        CompilationError: On the first type that fails validation.
    """
    documents = {}
    for entity_type in entity_types:
        fragment_text = fragments.get_fragment(entity_type.remote_type_name)
        documents[entity_type.remote_type_name] = compile_entity_type(schema, entity_type, fragment_text)
    return MappingProxyType(documents)
