from typing import Optional

from fastapi import FastAPI, HTTPException, Query

from . import config, schemas
from .graph import TreeView, TreeViewCache, build_relations

app = FastAPI(title="kinship")
cache = TreeViewCache()


def _nodes_out(view: TreeView):
    return [n.to_wire() for n in view.nodes]


def _orientation(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    try:
        return config.validate_orientation(value)
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


@app.get("/health")
def health():
    return {"ok": True}


@app.post("/tree/relations", response_model=schemas.RelationsOut)
def tree_relations(body: schemas.TreeSnapshot, root_id: Optional[int] = Query(None, alias="rootId")):
    view = build_relations(body, root_id)
    if view.root_id is None:
        return schemas.RelationsOut()
    return schemas.RelationsOut(
        root_id=str(view.root_id),
        ancestor_ids=[str(i) for i in sorted(view.ancestors)],
        nodes=_nodes_out(view),
    )


@app.post("/tree/layout", response_model=schemas.TreeLayoutOut)
def tree_layout(
    body: schemas.TreeSnapshot,
    root_id: Optional[int] = Query(None, alias="rootId"),
    orientation: Optional[str] = Query(None),
):
    view = cache.get_or_build(body, root_id=root_id, root_orientation=_orientation(orientation))
    if view.root_id is None:
        return schemas.TreeLayoutOut()

    out = schemas.TreeLayoutOut(root_id=str(view.root_id), nodes=_nodes_out(view))
    if view.error is not None:
        out.error = schemas.LayoutErrorOut(**view.error.to_dict())
    else:
        out.layout = view.layout.to_dict()
    return out
