from fastapi import APIRouter

from hostpanel.api.v1.endpoints import (
    customers,
    debugger,
    domains,
    resellers,
    server_ips,
    services,
    sql,
)

api_router = APIRouter()
api_router.include_router(customers.router, prefix="/customers", tags=["customers"])
api_router.include_router(domains.router, prefix="/domains", tags=["domains"])
api_router.include_router(services.router, prefix="/services", tags=["services"])
api_router.include_router(sql.router, prefix="/sql", tags=["sql"])
api_router.include_router(resellers.router, prefix="/resellers", tags=["resellers"])
api_router.include_router(server_ips.router, prefix="/server-ips", tags=["server-ips"])
api_router.include_router(debugger.router, prefix="/debugger", tags=["debugger"])
