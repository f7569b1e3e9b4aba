from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, Field

TierName = Literal["binary_upload", "remote_api", "copy_convert"]


class DocumentRef(BaseModel):
    id: str = Field(..., description="Идентификатор документа в хранилище")
    name: str = Field(..., description="Имя файла или заголовок страницы")
    url: str = Field(..., description="Серверный относительный путь или URL")
    content_type: str = Field(..., description="Тип содержимого: Word Document или Site Page")
    created: datetime | None = Field(default=None, description="Дата создания, если известна")


class SynthesizeRequest(BaseModel):
    content: str = Field(..., description="Текст в упрощённой разметке")
    document_name: str = Field(..., description="Имя документа без расширения")
    container: str | None = Field(
        default=None,
        description="Желаемая библиотека документов; при отсутствии выбирается первая доступная",
    )


class GenerateDocumentRequest(BaseModel):
    prompt: str = Field(..., description="Запрос пользователя к генератору текста")
    document_name: str = Field(..., description="Имя документа без расширения")
    template_url: str | None = Field(default=None, description="Путь к выбранному шаблону")
    reference_urls: list[str] = Field(
        default_factory=list,
        description="Материалы, содержимое которых передаётся генератору",
    )
    container: str | None = Field(default=None, description="Желаемая библиотека документов")


class StoredDocumentResponse(BaseModel):
    location: str = Field(..., description="Итоговый путь сохранённого документа")
    tier: TierName = Field(..., description="Способ сохранения, который сработал")
    degraded: bool = Field(..., description="Сохранён ли документ в упрощённом виде")


class DocumentListResponse(BaseModel):
    documents: list[DocumentRef] = Field(default_factory=list, description="Найденные документы")


class HealthResponse(BaseModel):
    status: str = Field(..., description="Текущее состояние API")
    enumeration_is_reliable: bool = Field(..., description="Используется ли поиск для перечисления документов")
    probed: bool = Field(..., description="Выполнялась ли проверка поиска")
