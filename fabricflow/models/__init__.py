# 按照依赖顺序导入
from .base import BaseModel
from .auth import User
from .master import Block, Rack, RelaxationBlock, RelaxationRack
from .fabric import (
    Buyer, FabricIncoming, Fabric,
    FabricStorage, FabricRelaxation, FabricControl, FabricRackRelocation
)
from .inventory import (
    Stage, Inventory, MovementType,
    InventoryMovement, InventoryMovementTime, InventoryEntry
)
