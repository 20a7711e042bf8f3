"""Tests for ActionGraphBuilder and the built Graph."""

import pytest

from clientquery.query.errors import DanglingReferenceError, GraphSealedError
from clientquery.query.graph import ActionGraphBuilder, ActionKind, ObjectPathKind, PropertySelection
from clientquery.query.identifier import IdAllocator
from clientquery.query.identity import IdentityToken
from clientquery.query.parameters import guid_param, string_param

TAXONOMY_SESSION = "981cbc68-9edc-4f8d-872f-71146fcbb84f"


@pytest.fixture
def builder():
    return ActionGraphBuilder()


class TestObjectPaths:

    def test_ids_are_returned_in_allocation_order(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        op = builder.add_object_path(session)
        oiq = builder.query_identity(session)
        store = builder.add_instance_method(session, "GetDefaultSiteCollectionTermStore")
        assert (session, op, oiq, store) == (1, 2, 3, 4)

    def test_shared_allocator_interleaves_paths_and_actions(self):
        builder = ActionGraphBuilder(IdAllocator(start=34))
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        assert session == 34
        assert builder.add_object_path(session) == 35
        assert builder.query_identity(session) == 36

    def test_node_fields(self, builder):
        ctor = builder.add_constructor("{104e8f06-1e00-4675-99c6-1b9b504ed8d8}")
        prop = builder.add_property_access(ctor, "PermissionRequests")
        method = builder.add_instance_method(prop, "GetById", [guid_param("4dc4c043-25ee-40f2-81d3-b3bf63da7538")])
        builder.add_object_path(method)
        graph = builder.build()

        ctor_node = graph.object_path(ctor)
        assert ctor_node.kind == ObjectPathKind.CONSTRUCTOR
        assert str(ctor_node.type_id) == "104e8f06-1e00-4675-99c6-1b9b504ed8d8"
        assert graph.object_path(prop).parent_id == ctor
        assert graph.object_path(prop).name == "PermissionRequests"
        assert graph.object_path(method).parameters == (guid_param("4dc4c043-25ee-40f2-81d3-b3bf63da7538"),)

    def test_identity_literal(self, builder):
        token = IdentityToken("abc|def:st:xyz==")
        path = builder.add_identity_literal(token)
        builder.add_object_path(path)
        node = builder.build().object_path(path)
        assert node.kind == ObjectPathKind.IDENTITY
        assert node.identity == token

    def test_identity_literal_requires_token(self, builder):
        with pytest.raises(TypeError):
            builder.add_identity_literal("abc|def:st:xyz==")

    @pytest.mark.parametrize("name", ["", "Get By Id", "1Groups", "Groups<", None])
    def test_rejects_invalid_member_names(self, builder, name):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        with pytest.raises(ValueError):
            builder.add_property_access(session, name)

    def test_rejects_invalid_type_id(self, builder):
        with pytest.raises(ValueError):
            builder.add_constructor("not-a-guid")

    @pytest.mark.parametrize("type_id", [" 104e8f06-1e00-4675-99c6-1b9b504ed8d8", "104e8f06-1e00-4675-99c6-1b9b504ed8d8\n"])
    def test_rejects_type_id_with_whitespace(self, builder, type_id):
        with pytest.raises(ValueError):
            builder.add_constructor(type_id)


class TestDanglingReferences:

    def test_unknown_parent(self, builder):
        with pytest.raises(DanglingReferenceError) as exc_info:
            builder.add_instance_method(99, "GetById")
        assert exc_info.value.reference_id == 99

    def test_action_cannot_target_action(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        op = builder.add_object_path(session)
        with pytest.raises(DanglingReferenceError):
            builder.query_identity(op)

    def test_path_from_another_builder(self, builder):
        other = ActionGraphBuilder()
        foreign = other.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        with pytest.raises(DanglingReferenceError):
            builder.add_object_path(foreign)

    @pytest.mark.parametrize("ref", [True, "1", None, 1.0])
    def test_non_integer_reference(self, builder, ref):
        builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        with pytest.raises(DanglingReferenceError):
            builder.add_object_path(ref)


class TestActions:

    def test_query_defaults_to_all_properties(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        query = builder.query_properties(session)
        action = builder.build().action(query)
        assert action.kind == ActionKind.QUERY
        assert action.selection == PropertySelection.all()
        assert action.is_retrieval

    def test_projected_selection(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        query = builder.query_properties(session, PropertySelection.only("Name", "Id"))
        selection = builder.build().action(query).selection
        assert selection.select_all is False
        assert selection.properties == ("Name", "Id")

    def test_set_property_accepts_plain_string(self, builder):
        path = builder.add_identity_literal(IdentityToken("token"))
        action_id = builder.set_property(path, "Description", "List of organizations")
        action = builder.build().action(action_id)
        assert action.kind == ActionKind.SET_PROPERTY
        assert action.parameters == (string_param("List of organizations"),)

    def test_commit_is_commit_all_method(self, builder):
        store = builder.add_identity_literal(IdentityToken("store"))
        commit = builder.commit(store)
        action = builder.build().action(commit)
        assert action.kind == ActionKind.INVOKE_METHOD
        assert action.name == "CommitAll"
        assert action.target_path_id == store
        assert not action.is_retrieval

    def test_retrieval_action_ids(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        builder.add_object_path(session)
        oiq = builder.query_identity(session)
        query = builder.query_properties(session)
        builder.invoke_method(session, "Refresh")
        assert builder.build().retrieval_action_ids == [oiq, query]


class TestBuild:

    def test_all_ids_unique(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        builder.add_object_path(session)
        builder.query_identity(session)
        store = builder.add_instance_method(session, "GetDefaultSiteCollectionTermStore")
        builder.add_object_path(store)
        graph = builder.build()
        assert graph.all_ids == [1, 2, 3, 4, 5]

    def test_builder_is_sealed_after_build(self, builder):
        session = builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")
        builder.add_object_path(session)
        builder.build()
        assert builder.is_sealed
        with pytest.raises(GraphSealedError):
            builder.add_object_path(session)
        with pytest.raises(GraphSealedError):
            builder.add_static_method(TAXONOMY_SESSION, "GetTaxonomySession")

    def test_empty_graph_builds(self, builder):
        graph = builder.build()
        assert graph.actions == ()
        assert graph.object_paths == ()

    def test_unknown_node_lookup(self, builder):
        graph = builder.build()
        with pytest.raises(KeyError):
            graph.action(1)
