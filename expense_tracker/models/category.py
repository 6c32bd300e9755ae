from pydantic import BaseModel

# ===== CATEGORY PYDANTIC MODELS =====

class CategoryResponse(BaseModel):
    id: int
    name: str

    class Config:
        from_attributes = True
