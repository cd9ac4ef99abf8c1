"""Persistence strategies for generated handlers.

Generated handlers only ever talk to a ``<Name>Store`` interface. Each
strategy emits the Go implementation of that interface for one
``PersistenceMode`` and names the imports the implementation needs.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass
from string import Template

from . import constants
from .naming import lower_first
from .options import PersistenceMode

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class StoreNames:
    """Go identifiers derived from a component name."""

    component: str

    @property
    def lower(self) -> str:
        return self.component.lower()

    @property
    def state_type(self) -> str:
        return f"{self.component}State"

    @property
    def interface(self) -> str:
        return f"{self.component}Store"

    @property
    def variable(self) -> str:
        return f"{lower_first(self.component)}Store"

    @property
    def not_found(self) -> str:
        return f"Err{self.component}StateNotFound"

    def substitutions(self) -> dict[str, str]:
        return {
            "Component": self.component,
            "lower": self.lower,
            "State": self.state_type,
            "Store": self.interface,
            "store": self.variable,
            "NotFound": self.not_found,
            "ttl_hours": str(constants.STATE_TTL_HOURS),
        }


_MEMORY_STORE = Template(
    """\
// memory${Component}Store keeps ${Component} state in process memory.
// One lock guards every instance.
type memory${Component}Store struct {
	mu     sync.RWMutex
	states map[string]*${State}
}

func newMemory${Component}Store() *memory${Component}Store {
	return &memory${Component}Store{states: make(map[string]*${State})}
}

func (s *memory${Component}Store) Get(id string) (*${State}, error) {
	s.mu.RLock()
	defer s.mu.RUnlock()
	state, ok := s.states[id]
	if !ok {
		return nil, ${NotFound}
	}
	copied := *state
	return &copied, nil
}

func (s *memory${Component}Store) Set(id string, state *${State}) error {
	s.mu.Lock()
	defer s.mu.Unlock()
	s.states[id] = state
	return nil
}

func (s *memory${Component}Store) Update(id string, mutate func(state *${State})) error {
	s.mu.Lock()
	defer s.mu.Unlock()
	state, ok := s.states[id]
	if !ok {
		return ${NotFound}
	}
	mutate(state)
	return nil
}

func (s *memory${Component}Store) Delete(id string) error {
	s.mu.Lock()
	defer s.mu.Unlock()
	delete(s.states, id)
	return nil
}

var ${store} ${Store} = newMemory${Component}Store()"""
)

_REDIS_STORE = Template(
    """\
// ${Component} state lives in Redis under "${lower}:<id>" and expires
// ${ttl_hours} hours after the last write.
const (
	${lower}KeyPrefix = "${lower}:"
	${lower}StateTTL  = ${ttl_hours} * time.Hour
)

type redis${Component}Store struct {
	client *redis.Client
}

func (s *redis${Component}Store) Get(id string) (*${State}, error) {
	payload, err := s.client.Get(context.Background(), ${lower}KeyPrefix+id).Bytes()
	if errors.Is(err, redis.Nil) {
		return nil, ${NotFound}
	}
	if err != nil {
		return nil, err
	}
	var state ${State}
	if err := json.Unmarshal(payload, &state); err != nil {
		return nil, err
	}
	return &state, nil
}

func (s *redis${Component}Store) Set(id string, state *${State}) error {
	payload, err := json.Marshal(state)
	if err != nil {
		return err
	}
	return s.client.Set(context.Background(), ${lower}KeyPrefix+id, payload, ${lower}StateTTL).Err()
}

// Update is a read-modify-write without a transaction.
func (s *redis${Component}Store) Update(id string, mutate func(state *${State})) error {
	state, err := s.Get(id)
	if err != nil {
		return err
	}
	mutate(state)
	return s.Set(id, state)
}

func (s *redis${Component}Store) Delete(id string) error {
	return s.client.Del(context.Background(), ${lower}KeyPrefix+id).Err()
}

// Use${Component}Redis binds the ${Component} handlers to a Redis client.
func Use${Component}Redis(client *redis.Client) {
	Use${Component}Store(&redis${Component}Store{client: client})
}

// ${store} is nil until Use${Component}Redis or Use${Component}Store is called.
var ${store} ${Store}"""
)

_REPOSITORY_STORE = Template(
    """\
// ${Component}Repository is the database capability that backs ${Component} state.
type ${Component}Repository interface {
	GetState(id string) (*${State}, error)
	SaveState(id string, state *${State}) error
	UpdateState(id string, state *${State}) error
	DeleteState(id string) error
}

type repository${Component}Store struct {
	repo ${Component}Repository
}

func (s *repository${Component}Store) Get(id string) (*${State}, error) {
	state, err := s.repo.GetState(id)
	if err != nil {
		return nil, err
	}
	if state == nil {
		return nil, ${NotFound}
	}
	return state, nil
}

func (s *repository${Component}Store) Set(id string, state *${State}) error {
	return s.repo.SaveState(id, state)
}

func (s *repository${Component}Store) Update(id string, mutate func(state *${State})) error {
	state, err := s.Get(id)
	if err != nil {
		return err
	}
	mutate(state)
	return s.repo.UpdateState(id, state)
}

func (s *repository${Component}Store) Delete(id string) error {
	return s.repo.DeleteState(id)
}

// Use${Component}Repository binds the ${Component} handlers to a repository.
func Use${Component}Repository(repo ${Component}Repository) {
	Use${Component}Store(&repository${Component}Store{repo: repo})
}

// ${store} is nil until Use${Component}Repository or Use${Component}Store is called.
var ${store} ${Store}"""
)


class PersistenceStrategy(ABC):
    """Emits the Go ``StateStore`` implementation for one persistence mode."""

    mode: PersistenceMode

    @abstractmethod
    def imports(self) -> list[str]: ...

    @abstractmethod
    def template(self) -> Template: ...

    def declaration(self, names: StoreNames) -> str:
        """Tab-indented Go source for the store implementation."""
        return self.template().substitute(names.substitutions())


class MemoryPersistence(PersistenceStrategy):
    mode = PersistenceMode.MEMORY

    def imports(self) -> list[str]:
        return ["sync"]

    def template(self) -> Template:
        return _MEMORY_STORE


class KeyValuePersistence(PersistenceStrategy):
    mode = PersistenceMode.EXTERNAL_KV

    def imports(self) -> list[str]:
        return ["context", "encoding/json", "time", constants.REDIS_MODULE]

    def template(self) -> Template:
        return _REDIS_STORE


class RepositoryPersistence(PersistenceStrategy):
    mode = PersistenceMode.EXTERNAL_DB

    def imports(self) -> list[str]:
        return []

    def template(self) -> Template:
        return _REPOSITORY_STORE


_STRATEGIES: dict[PersistenceMode, type[PersistenceStrategy]] = {
    PersistenceMode.MEMORY: MemoryPersistence,
    PersistenceMode.EXTERNAL_KV: KeyValuePersistence,
    PersistenceMode.EXTERNAL_DB: RepositoryPersistence,
}


def get_persistence(mode: PersistenceMode | str) -> PersistenceStrategy:
    """Factory: return the strategy for a persistence mode.

    Raises:
        ValueError: If the mode is unknown.
    """
    try:
        strategy_cls = _STRATEGIES[PersistenceMode(mode)]
    except ValueError:
        raise ValueError(
            f"Unknown persistence mode {mode!r}; expected one of "
            f"{[m.value for m in PersistenceMode]}"
        ) from None
    logger.debug("Using %s persistence", strategy_cls.mode.value)
    return strategy_cls()
