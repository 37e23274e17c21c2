"""
Sink interface for CityJSON Mesher.

A sink receives the finished meshes and entities of a conversion run.
The converter only calls into the sink; sinks never call back into the
converter.
"""

from abc import ABC, abstractmethod

from ..models.citymodel import CityObjectResult, MetaObject
from ..models.mesh import MeshRecord


class IModelSink(ABC):
    """
    Abstract interface for a buildable model.

    Implementations store or upload meshes and entities; both calls are
    synchronous.
    """

    @abstractmethod
    def create_mesh(self, mesh: MeshRecord) -> None:
        """
        Receive one finished triangle mesh.

        Args:
            mesh: Mesh with id, positions, indices, color and opacity
        """
        pass

    @abstractmethod
    def create_entity(self, entity: CityObjectResult) -> None:
        """
        Receive one entity grouping the meshes of a city object.

        Args:
            entity: City object id and the ids of its meshes
        """
        pass

    def create_meta_object(self, meta_object: MetaObject) -> None:
        """
        Receive one metadata object. Ignored unless overridden.

        Args:
            meta_object: Hierarchy entry for a city object
        """
        pass

