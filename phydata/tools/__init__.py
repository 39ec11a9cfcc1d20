from phydata.tools.tables import (
    TableFormatError, read_observations, write_observations,
    read_sequences, write_sequences,
)
from phydata.tools.project import Project, ProjectError
from phydata.tools.lists import read_list, read_taxa
