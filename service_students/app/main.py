"""
Student service for the Student Portal.
"""

from typing import List, Optional

from fastapi import Depends, Response, status

from shared.auth import RequirePrincipal, TokenVerifier, VerifiedPrincipal, create_token_verifier, ensure_owner
from shared.base_service import BaseService
from shared.config import ServiceConfig
from shared.persistence import TableFactory
from .models import STUDENT_COLUMNS, STUDENT_TABLE, Student, StudentRepository, StudentRequest


class StudentService(BaseService):
    """Student service implementation."""

    def __init__(self, config: Optional[ServiceConfig] = None, verifier: Optional[TokenVerifier] = None):
        super().__init__("students", 8020, config=config)
        self.tables = TableFactory(self.config)
        self.students = StudentRepository(self.tables.table(STUDENT_TABLE, STUDENT_COLUMNS))
        self.verifier = verifier or create_token_verifier(self.config)
        self.require_principal = RequirePrincipal(self.verifier)

        self._setup_student_routes()

    async def on_startup(self):
        await self.tables.start()

    async def on_shutdown(self):
        await self.tables.stop()
        await self.verifier.close()

    def _setup_student_routes(self):
        """Set up student routes."""
        require_principal = self.require_principal

        @self.app.get("/")
        async def root():
            """Root endpoint."""
            return {
                "service": "students",
                "message": "Student Portal - Student Service",
                "version": "1.0.0"
            }

        @self.app.post("/api/students", response_model=Student, status_code=status.HTTP_201_CREATED)
        async def create_student(request: StudentRequest):
            student = await self.students.create(request)
            self.logger.info("Student created", student_id=student.id)
            return student

        @self.app.get("/api/students", response_model=List[Student])
        async def list_students():
            return await self.students.list()

        @self.app.get("/api/students/{student_id}", response_model=Student)
        async def get_student(student_id: int):
            return await self.students.get(student_id)

        @self.app.put("/api/students/{student_id}", response_model=Student)
        async def update_student(student_id: int, request: StudentRequest):
            return await self.students.update(student_id, request)

        @self.app.delete("/api/students/{student_id}", status_code=status.HTTP_204_NO_CONTENT)
        async def delete_student(student_id: int):
            await self.students.delete(student_id)
            self.logger.info("Student deleted", student_id=student_id)
            return Response(status_code=status.HTTP_204_NO_CONTENT)

        @self.app.get("/students/profile/{student_id}", response_model=Student)
        async def get_profile(student_id: int, principal: VerifiedPrincipal = Depends(require_principal)):
            """Fetch a profile; only its owner may read it."""
            # Ownership is checked before the lookup so a mismatch never reveals existence
            ensure_owner(principal, student_id)
            return await self.students.get(student_id)

    async def _check_dependencies(self):
        """Check student service dependencies."""
        return {"database": await self.tables.check()}


def create_app(config: Optional[ServiceConfig] = None, verifier: Optional[TokenVerifier] = None):
    """Create FastAPI application."""
    service = StudentService(config, verifier)
    return service.app


if __name__ == "__main__":
    service = StudentService()
    service.run()
