# This source code is part of the mdlmol package and is distributed
# under the 3-Clause BSD License. Please see 'LICENSE.rst' for further
# information.

import io
import logging
from os.path import join
from tempfile import TemporaryFile
import numpy as np
import pytest
import mdlmol
from tests.util import data_dir


@pytest.fixture
def compounds_path():
    return join(data_dir(), "compounds.sdf")


@pytest.fixture
def malformed_path():
    return join(data_dir(), "malformed.sdf")


def test_records(compounds_path):
    sdf_file = mdlmol.SDFile.read(compounds_path)
    assert len(sdf_file) == 3
    assert [record.header.mol_name for record in sdf_file] == [
        "acetic acid",
        "ethanol",
        "sodium",
    ]
    assert sdf_file[1].header.comments == "from a database"


def test_data_block(compounds_path):
    sdf_file = mdlmol.SDFile.read(compounds_path)
    assert dict(sdf_file[0].data) == {
        "PKA": "4.65",
        "SYNONYMS": ["Acetic acid", "Ethanoic acid"],
    }
    # The field without name is skipped
    assert dict(sdf_file[1].data) == {"BOILING_POINT": "78.37"}
    assert dict(sdf_file[2].data) == {}


def test_unnamed_data_field(caplog, compounds_path):
    mdlmol.SDFile.read(compounds_path)
    assert len(caplog.records) == 1
    assert caplog.records[0].levelno == logging.WARNING
    assert "'> 12'" in caplog.text


def test_get_molecules(compounds_path):
    molecules = mdlmol.SDFile.read(compounds_path).get_molecules()
    assert [molecule.name for molecule in molecules] == [
        "acetic acid",
        "ethanol",
        "sodium",
    ]
    assert [len(molecule.atoms) for molecule in molecules] == [4, 3, 1]
    assert molecules[0].attributes["sdf/data"]["PKA"] == "4.65"
    assert molecules[1].coord[2].tolist() == [2.03, 1.32, 0.1]
    assert molecules[2].atom(1).formal_charge == 1


def test_records_equal_standalone_molfiles(compounds_path):
    """
    Each record is parsed like a MOL file consisting of the same
    lines.
    """
    sdf_file = mdlmol.SDFile.read(compounds_path)
    for record, molecule in zip(sdf_file, sdf_file.get_molecules()):
        mol_file = mdlmol.MOLFile.read(io.StringIO(str(record)))
        ref_molecule = mol_file.get_molecule()
        assert molecule.name == ref_molecule.name
        assert [atom.symbol for atom in molecule.atoms] == [
            atom.symbol for atom in ref_molecule.atoms
        ]
        assert np.array_equal(molecule.coord, ref_molecule.coord)
        assert [atom.formal_charge for atom in molecule.atoms] == [
            atom.formal_charge for atom in ref_molecule.atoms
        ]


def test_read_iter(compounds_path):
    ref_records = list(mdlmol.SDFile.read(compounds_path))
    test_records = list(mdlmol.SDFile.read_iter(compounds_path))
    assert test_records == ref_records


def test_record_error(malformed_path):
    """
    An error in a record reports the record index and the line number
    in the file.
    """
    sdf_file = mdlmol.SDFile.read(malformed_path)
    with pytest.raises(mdlmol.DanglingBondReferenceError) as excinfo:
        sdf_file.get_molecules()
    assert excinfo.value.record_index == 1
    assert excinfo.value.line_number == 14
    assert str(excinfo.value).endswith("(record 1, line 14)")


def test_best_effort(caplog, malformed_path):
    sdf_file = mdlmol.SDFile.read(malformed_path)
    molecules = sdf_file.get_molecules(best_effort=True)
    assert [molecule.name for molecule in molecules] == ["water", "methane"]
    assert [record.levelno for record in caplog.records] == [logging.ERROR]
    assert "record 1" in caplog.text


def test_convert_record_index(malformed_path):
    sdf_file = mdlmol.SDFile.read(malformed_path)
    assert mdlmol.get_molecule(sdf_file, record_index=2).name == "methane"
    with pytest.raises(mdlmol.CtabError) as excinfo:
        mdlmol.get_molecule(sdf_file, record_index=1)
    assert excinfo.value.record_index == 1


def test_missing_final_delimiter(caplog):
    with open(join(data_dir(), "ammonium_acetate.mol")) as file:
        text = file.read()
    sdf_file = mdlmol.SDFile.deserialize(text)
    assert len(sdf_file) == 1
    assert sdf_file.record.get_molecule().name == "ammonium acetate"
    assert "delimiter missing" in caplog.text


@pytest.mark.parametrize(
    "suffix", ["", "\n", "\n\n", "  \n"]
)
def test_trailing_content(caplog, suffix):
    """
    Whitespace after the final delimiter does not create a record.
    """
    text = "water\n\n\n  1  0\n    0.0000    0.0000    0.0000 O\nM  END\n$$$$" + suffix
    sdf_file = mdlmol.SDFile.deserialize(text)
    assert len(sdf_file) == 1
    assert caplog.text == ""


def test_delimiter_with_trailing_whitespace():
    text = (
        "a\n\n\n  1  0\n    0.0000    0.0000    0.0000 O\nM  END\n$$$$   \n"
        "b\n\n\n  1  0\n    0.0000    0.0000    0.0000 N\nM  END\n$$$$\n"
    )
    molecules = mdlmol.SDFile.deserialize(text).get_molecules()
    assert [molecule.name for molecule in molecules] == ["a", "b"]


def test_line_breaks(compounds_path):
    with open(compounds_path) as file:
        text = file.read()
    ref_file = mdlmol.SDFile.deserialize(text)
    test_file = mdlmol.SDFile.deserialize(text.replace("\n", "\r\n"))
    assert test_file == ref_file


def test_file_conversion(compounds_path):
    """
    Writing a file and reading it again gives the same records.
    """
    ref_file = mdlmol.SDFile.read(compounds_path)
    temp = TemporaryFile("w+")
    ref_file.write(temp)

    temp.seek(0)
    test_file = mdlmol.SDFile.read(temp)
    temp.close()

    assert test_file == ref_file


def test_structure_conversion(compounds_path):
    """
    Setting the molecules of a file including their data fields and
    reading them again gives the same molecules.
    """
    ref_molecules = mdlmol.SDFile.read(compounds_path).get_molecules()

    sdf_file = mdlmol.SDFile()
    sdf_file.set_molecules(ref_molecules)
    temp = TemporaryFile("w+")
    sdf_file.write(temp)

    temp.seek(0)
    test_molecules = mdlmol.SDFile.read(temp).get_molecules()
    temp.close()

    assert len(test_molecules) == len(ref_molecules)
    for test_molecule, ref_molecule in zip(test_molecules, ref_molecules):
        assert test_molecule.name == ref_molecule.name
        assert np.allclose(test_molecule.coord, ref_molecule.coord, atol=1e-4)
        assert test_molecule.attributes["sdf/data"] == ref_molecule.attributes["sdf/data"]


def test_serialize_data_block():
    """
    Data fields are written sorted by their name, each one terminated
    by an empty line.
    """
    molecule = mdlmol.Molecule("water")
    molecule.add_atom("O", [0, 0, 0])
    molecule.attributes["sdf/data"] = {"ZETA": "1", "ALPHA": ["x", "y"]}
    sdf_file = mdlmol.SDFile()
    sdf_file.set_molecules([molecule])
    assert sdf_file.serialize().splitlines()[-9:] == [
        "M  END",
        ">  <ALPHA>",
        "x",
        "y",
        "",
        ">  <ZETA>",
        "1",
        "",
        "$$$$",
    ]


def test_empty_data_field():
    data = mdlmol.DataBlock.deserialize([">  <EMPTY>", "", ">  <FULL>", "1", ""])
    assert dict(data) == {"EMPTY": [], "FULL": "1"}


def test_empty_string_data_field():
    """
    A field holding an empty string is written as a single empty value
    line and is read back as empty string.
    """
    record = mdlmol.SDRecord(data={"EMPTY": "", "FULL": "1"})
    molecule = mdlmol.Molecule("x")
    molecule.add_atom("C", [0, 0, 0])
    record.set_molecule(molecule)
    sdf_file = mdlmol.SDFile([record])
    temp = TemporaryFile("w+")
    sdf_file.write(temp)
    temp.seek(0)
    test_record = mdlmol.SDFile.read(temp)[0]
    temp.close()
    assert dict(test_record.data) == {"EMPTY": "", "FULL": "1"}


def test_molecule_data_is_copy():
    """
    Modifying the data fields of a molecule, including multi-line
    values, does not alter the record it was read from.
    """
    record = mdlmol.SDRecord(data={"SYNONYMS": ["a", "b"], "ID": "1"})
    molecule = mdlmol.Molecule("x")
    molecule.add_atom("C", [0, 0, 0])
    record.set_molecule(molecule)
    test_molecule = record.get_molecule()
    test_molecule.attributes["sdf/data"]["SYNONYMS"].append("c")
    test_molecule.attributes["sdf/data"]["ID"] = "2"
    assert dict(record.data) == {"SYNONYMS": ["a", "b"], "ID": "1"}


@pytest.mark.parametrize(
    "header, ref_name",
    [
        (">  <NAME>", "NAME"),
        ("> <NAME> (MD-08974)", "NAME"),
        ("> 25 <NAME> ", "NAME"),
        (">  <FIELD WITH SPACE>", "FIELD WITH SPACE"),
    ],
)
def test_data_field_name(header, ref_name):
    data = mdlmol.DataBlock.deserialize([header, "value", ""])
    assert dict(data) == {ref_name: "value"}


@pytest.mark.parametrize(
    "name, error_class", [("<a>", ValueError), ("", ValueError), (1, TypeError)]
)
def test_invalid_data_field_name(name, error_class):
    data = mdlmol.DataBlock()
    with pytest.raises(error_class):
        data[name] = "value"


def test_data_value_types():
    data = mdlmol.DataBlock({"NUMBERS": [1, 2.5]})
    assert data["NUMBERS"] == ["1", "2.5"]


def test_record_access():
    sdf_file = mdlmol.SDFile()
    with pytest.raises(ValueError):
        sdf_file.record
    sdf_file.append(mdlmol.SDRecord())
    assert sdf_file.record is sdf_file[0]
    sdf_file.append(mdlmol.SDRecord())
    with pytest.raises(ValueError):
        sdf_file.record
    with pytest.raises(TypeError):
        sdf_file.append("record")
    with pytest.raises(TypeError):
        sdf_file[0] = "record"
    del sdf_file[0]
    assert len(sdf_file) == 1


def test_empty_record():
    """
    A record without structure is written as empty connection table.
    """
    record = mdlmol.SDRecord(data={"ID": "1"})
    assert record.serialize() == [
        "",
        "",
        "",
        "  0  0  0  0  0  0  0  0  0  0999 V2000",
        "M  END",
        ">  <ID>",
        "1",
        "",
    ]


def test_empty_file():
    assert mdlmol.SDFile().serialize() == ""
    assert len(mdlmol.SDFile.deserialize("")) == 0


def test_set_molecule_keeps_data():
    """
    Setting a molecule without data fields keeps the fields of the
    record.
    """
    record = mdlmol.SDRecord(data={"ID": "1"})
    molecule = mdlmol.Molecule("x")
    molecule.add_atom("C", [0, 0, 0])
    record.set_molecule(molecule)
    assert dict(record.data) == {"ID": "1"}
    assert record.get_molecule().name == "x"


def test_serialization_error():
    record = mdlmol.SDRecord(header=mdlmol.Header("x" * 81))
    sdf_file = mdlmol.SDFile([record])
    with pytest.raises(mdlmol.SerializationError):
        sdf_file.serialize()
