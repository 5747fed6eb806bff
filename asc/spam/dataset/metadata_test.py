import os

import pytest
from asc.spam.dataset.metadata import (
    DataSetMetadata,
    load_dataset_metadata,
    parse_metadata_line,
    shorten_folder_name,
)


class TestParseMetadataLine:
    def test_basic(self):
        entry = parse_metadata_line("/data/TREC/CHI2/64,10,20")
        assert entry.folder == "/data/TREC/CHI2/64"
        assert entry.empty_ham_count == 10
        assert entry.empty_spam_count == 20

    def test_whitespace_is_stripped(self):
        entry = parse_metadata_line(" /data/x , 1 , 2 ")
        assert entry.folder == "/data/x"
        assert entry.empty_spam_count == 2

    def test_home_is_expanded(self):
        entry = parse_metadata_line("~/datasets/a,0,0")
        assert entry.folder == os.path.expanduser("~/datasets/a")

    @pytest.mark.parametrize("line", ["/data/x,1", "/data/x,a,2", ",1,2", "/data/x,1,2,3"])
    def test_malformed(self, line):
        with pytest.raises(ValueError):
            parse_metadata_line(line)

    def test_negative_counts(self):
        with pytest.raises(ValueError):
            parse_metadata_line("/data/x,-1,0")


class TestLoadDatasetMetadata:
    def test_skips_comments_and_duplicates(self, tmp_path):
        path = tmp_path / "datasets.txt"
        path.write_text("# corpus folders\n\n/data/b,0,0\n/data/a,1,1\n/data/b,0,0\n")
        entries = load_dataset_metadata(str(path))
        assert [entry.folder for entry in entries] == ["/data/b", "/data/a"]

    def test_reports_line_number(self, tmp_path):
        path = tmp_path / "datasets.txt"
        path.write_text("/data/a,0,0\nbroken\n")
        with pytest.raises(ValueError, match=":2:"):
            load_dataset_metadata(str(path))

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_dataset_metadata(str(tmp_path / "missing.txt"))


class TestDataSetMetadata:
    def test_names(self):
        entry = DataSetMetadata(folder="/home/user/corpora/TREC/CHI2/64")
        assert entry.name == "TREC/CHI2/64"
        assert entry.statistics_method == "CHI2"

    def test_shorten_folder_name(self):
        assert shorten_folder_name("/a/b/c/d/", levels=2) == "c/d"
        assert shorten_folder_name("x") == "x"

    def test_validate(self, tmp_path):
        DataSetMetadata(folder=str(tmp_path)).validate()
        with pytest.raises(FileNotFoundError):
            DataSetMetadata(folder=str(tmp_path / "missing")).validate()
