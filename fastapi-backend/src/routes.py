from reports.membership import router as membership_router
from reports.platforms import router as platforms_router
from reports.snapshot import router as snapshot_router


ALL_ROUTERS = [
	membership_router,
	platforms_router,
	snapshot_router,
]
