from functools import lru_cache
from typing import Optional

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .models import DEFAULT_GROUP_FILTER, DEFAULT_USER_FILTER, ClientConfig
from .utils import domain_to_base_dn, split_names


class ADClientSettings(BaseSettings):
    host: str = Field(..., alias="AD_HOST")
    port: int = Field(389, alias="AD_PORT")
    base_dn: str = Field("", alias="AD_BASE_DN")
    domain: str = Field("", alias="AD_DOMAIN")

    bind_dn: str = Field("", alias="AD_BIND_DN")
    bind_password: str = Field("", alias="AD_BIND_PASSWORD", repr=False)

    user_filter: str = Field(DEFAULT_USER_FILTER, alias="AD_USER_FILTER")
    group_filter: str = Field(DEFAULT_GROUP_FILTER, alias="AD_GROUP_FILTER")
    attributes: str = Field("", alias="AD_ATTRIBUTES")

    use_ssl: bool = Field(False, alias="AD_USE_SSL")
    skip_tls: bool = Field(False, alias="AD_SKIP_TLS")
    insecure_skip_verify: bool = Field(False, alias="AD_INSECURE_SKIP_VERIFY")
    server_name: str = Field("", alias="AD_SERVER_NAME")
    client_cert_file: str = Field("", alias="AD_CLIENT_CERT_FILE")
    client_key_file: str = Field("", alias="AD_CLIENT_KEY_FILE")
    ca_certs_file: str = Field("", alias="AD_CA_CERTS_FILE")

    connect_timeout: Optional[float] = Field(None, alias="AD_CONNECT_TIMEOUT")
    page_size: int = Field(500, alias="AD_PAGE_SIZE")

    log_level: str = Field("WARNING", alias="AD_LOG_LEVEL")
    log_file: str = Field("", alias="AD_LOG_FILE")

    model_config = SettingsConfigDict(populate_by_name=True, env_file=".env", extra="ignore")

    def resolved_base_dn(self) -> str:
        return self.base_dn or domain_to_base_dn(self.domain)

    def to_config(self) -> ClientConfig:
        return ClientConfig(
            host=self.host,
            port=self.port,
            base_dn=self.resolved_base_dn(),
            bind_dn=self.bind_dn,
            bind_password=self.bind_password,
            user_filter=self.user_filter,
            group_filter=self.group_filter,
            attributes=tuple(split_names(self.attributes)),
            use_ssl=self.use_ssl,
            skip_tls=self.skip_tls,
            insecure_skip_verify=self.insecure_skip_verify,
            server_name=self.server_name,
            client_cert_file=self.client_cert_file,
            client_key_file=self.client_key_file,
            ca_certs_file=self.ca_certs_file,
            connect_timeout=self.connect_timeout,
            page_size=self.page_size,
        )


@lru_cache(maxsize=1)
def get_settings() -> ADClientSettings:
    return ADClientSettings()
