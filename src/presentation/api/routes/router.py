from fastapi import APIRouter

from .health import health_router
from .khqr import khqr_router
from .payment import payment_router
from .account import account_router
from .callback import callback_router

router = APIRouter()

router.include_router(health_router, tags=["Health"])
router.include_router(khqr_router, tags=["KHQR"])
router.include_router(payment_router, tags=["Payments"])
router.include_router(account_router, tags=["Accounts"])
router.include_router(callback_router, tags=["Callback"])
