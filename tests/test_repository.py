import json

import pytest

from mathwiki import config
from mathwiki.model.content import PageType, VisualKind
from mathwiki.model.errors import (
    ContentError,
    CorpusDecodeError,
    DuplicatePageID,
    InvalidRelatedReference,
    MissingDerivation,
    MissingResource,
    MissingVisual,
    ValidationError,
)
from mathwiki.model.repository import ContentRepository
from tests.fixtures import derivation_dict, page_dict, sample_pages, visual_dict, write_corpus


class TestLoad:

    def test_loads_and_sorts_pages_by_title(self, corpus_dir):
        repo = ContentRepository(str(corpus_dir))
        repo.load()
        assert [p.title for p in repo.pages] == ["Normal Distribution", "Polynomial", "Quadratic Formula"]

    def test_lookup_by_id(self, corpus_dir):
        repo = ContentRepository(str(corpus_dir))
        repo.load()
        page = repo.page("quadratic-formula")
        assert page.type == PageType.EQUATION
        assert page.related_page_ids == ("polynomial",)
        assert repo.visual(page.visual_spec_id).kind == VisualKind.GRAPH_2D
        assert len(repo.derivation(page.derivation_id).steps) == 2
        assert repo.page("missing") is None

    def test_bundled_corpus_is_valid(self):
        repo = ContentRepository(config.DATA_PATH)
        repo.load()
        assert len(repo.pages) > 10
        for page_id in config.FEATURED_PAGE_IDS:
            assert repo.page(page_id) is not None


class TestValidation:

    def test_duplicate_page_id(self, tmp_path):
        pages = sample_pages() + [page_dict("polynomial", "Another Polynomial")]
        repo = ContentRepository(str(write_corpus(tmp_path, pages=pages)))
        with pytest.raises(DuplicatePageID) as exc_info:
            repo.load()
        assert exc_info.value.page_id == "polynomial"

    def test_missing_visual(self, tmp_path):
        pages = sample_pages()
        pages[1]["visualSpecID"] = "visual-nowhere"
        repo = ContentRepository(str(write_corpus(tmp_path, pages=pages)))
        with pytest.raises(MissingVisual) as exc_info:
            repo.load()
        assert (exc_info.value.page_id, exc_info.value.visual_id) == ("polynomial", "visual-nowhere")

    def test_equation_without_derivation_reference(self, tmp_path):
        pages = sample_pages()
        pages[0]["derivationID"] = None
        repo = ContentRepository(str(write_corpus(tmp_path, pages=pages)))
        with pytest.raises(MissingDerivation) as exc_info:
            repo.load()
        assert exc_info.value.page_id == "quadratic-formula"
        assert exc_info.value.is_absent
        assert exc_info.value.derivation_id == MissingDerivation.ABSENT_DERIVATION

    def test_equation_with_unresolvable_derivation(self, tmp_path):
        pages = sample_pages()
        pages[0]["derivationID"] = "derivation-nowhere"
        repo = ContentRepository(str(write_corpus(tmp_path, pages=pages)))
        with pytest.raises(MissingDerivation) as exc_info:
            repo.load()
        assert not exc_info.value.is_absent
        assert exc_info.value.derivation_id == "derivation-nowhere"

    def test_fixing_the_derivation_allows_load(self, tmp_path):
        pages = sample_pages()
        pages[0]["derivationID"] = None
        write_corpus(tmp_path, pages=pages)
        repo = ContentRepository(str(tmp_path))
        with pytest.raises(MissingDerivation):
            repo.load()

        write_corpus(tmp_path)
        repo.load()
        assert repo.page("quadratic-formula").derivation_id == "derivation-qf"

    def test_concept_needs_no_derivation(self, tmp_path):
        repo = ContentRepository(str(write_corpus(tmp_path, derivations=[derivation_dict()])))
        repo.load()
        assert repo.page("polynomial").derivation_id is None

    def test_invalid_related_reference(self, tmp_path):
        pages = sample_pages()
        pages[2]["relatedPageIDs"] = ["quadratic-formula", "ghost"]
        repo = ContentRepository(str(write_corpus(tmp_path, pages=pages)))
        with pytest.raises(InvalidRelatedReference) as exc_info:
            repo.load()
        assert exc_info.value.related_id == "ghost"

    def test_validation_errors_share_a_base(self):
        assert issubclass(MissingVisual, ValidationError)
        assert issubclass(ValidationError, ContentError)

    def test_failed_reload_keeps_previous_content(self, tmp_path):
        write_corpus(tmp_path)
        repo = ContentRepository(str(tmp_path))
        repo.load()

        pages = sample_pages()
        pages[1]["visualSpecID"] = "visual-nowhere"
        write_corpus(tmp_path, pages=pages)
        with pytest.raises(MissingVisual):
            repo.load()
        assert repo.page("polynomial").visual_spec_id == "visual-linear"


class TestDecoding:

    def test_missing_file(self, tmp_path):
        write_corpus(tmp_path)
        (tmp_path / "visuals.json").unlink()
        with pytest.raises(MissingResource) as exc_info:
            ContentRepository(str(tmp_path)).load()
        assert exc_info.value.resource == "visuals.json"

    def test_malformed_json(self, tmp_path):
        write_corpus(tmp_path)
        (tmp_path / "pages.json").write_text("[{", encoding="utf-8")
        with pytest.raises(CorpusDecodeError) as exc_info:
            ContentRepository(str(tmp_path)).load()
        assert exc_info.value.collection == "pages"

    def test_missing_required_field(self, tmp_path):
        pages = sample_pages()
        del pages[1]["title"]
        write_corpus(tmp_path, pages=pages)
        with pytest.raises(CorpusDecodeError) as exc_info:
            ContentRepository(str(tmp_path)).load()
        assert exc_info.value.index == 1
        assert "title" in exc_info.value.reason

    def test_wrong_type(self, tmp_path):
        pages = sample_pages()
        pages[0]["tags"] = "Algebra"
        write_corpus(tmp_path, pages=pages)
        with pytest.raises(CorpusDecodeError):
            ContentRepository(str(tmp_path)).load()

    def test_unknown_page_type(self, tmp_path):
        pages = sample_pages()
        pages[2]["type"] = "theorem"
        write_corpus(tmp_path, pages=pages)
        with pytest.raises(CorpusDecodeError):
            ContentRepository(str(tmp_path)).load()

    def test_parameter_default_outside_range(self, tmp_path):
        visual = visual_dict()
        visual["parameters"][0]["defaultValue"] = 50
        write_corpus(tmp_path, visuals=[visual])
        with pytest.raises(CorpusDecodeError) as exc_info:
            ContentRepository(str(tmp_path)).load()
        assert exc_info.value.collection == "visuals"

    def test_derivation_without_steps(self, tmp_path):
        derivation = derivation_dict()
        derivation["steps"] = []
        write_corpus(tmp_path, derivations=[derivation])
        with pytest.raises(CorpusDecodeError):
            ContentRepository(str(tmp_path)).load()

    def test_top_level_must_be_a_list(self, tmp_path):
        write_corpus(tmp_path)
        (tmp_path / "derivations.json").write_text(json.dumps({"id": "x"}), encoding="utf-8")
        with pytest.raises(CorpusDecodeError):
            ContentRepository(str(tmp_path)).load()
