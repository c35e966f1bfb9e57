from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from healthchat.db.session import get_db
from healthchat.models.user import User
from healthchat.api.deps import get_current_user
from healthchat.core.analysis import analyze, export_report

router = APIRouter(prefix="/api/analysis", tags=["Health Analysis"])


@router.get("")
def get_analysis(db: Session = Depends(get_db), user: User = Depends(get_current_user)):
    return analyze(db, user.id)


@router.post("/export")
def export_analysis(user: User = Depends(get_current_user)):
    return export_report(user.id)
