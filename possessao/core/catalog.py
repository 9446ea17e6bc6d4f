"""
Static entity catalog
"""
from typing import Dict, Iterator, List, Optional, Sequence, Tuple

from possessao.core.entities import (
    EntityDefinition,
    SEX_MALE,
    SEX_FEMALE,
    AGE_CHILD,
    AGE_TEEN,
    AGE_ADULT,
    AGE_ELDER,
)
from possessao.utils.logger import get_logger

logger = get_logger(__name__)


def _entity(
    id: str,
    name: str,
    culture: str,
    traits: Sequence[str],
    description: str,
    traditions: Sequence[str],
    references: Sequence[str],
    genders: Sequence[str] = (),
    age_groups: Sequence[str] = (),
) -> EntityDefinition:
    return EntityDefinition(
        id=id,
        name=name,
        culture=culture,
        traits=tuple(traits),
        description=description,
        traditions=tuple(traditions),
        references=tuple(references),
        affected_genders=frozenset(genders),
        affected_age_groups=frozenset(age_groups),
    )


def sample_entities() -> List[EntityDefinition]:
    """Seed list used to build the catalog"""
    return [
        _entity(
            "pazuzu", "Pazuzu", "Mesopotâmica",
            ["somnambulism", "mood_swings", "temperature_shift"],
            "Espírito dos ventos do sudoeste, híbrido e protetor contra forças malignas como "
            "Lamashtu, porém de humor instável e presença noturna.",
            [
                "Etapa I: Abrir janelas ou portas por alguns minutos, permitindo que o ar circule livremente.",
                "Etapa II: Caminhar ao ar livre e respirar fundo, simbolizando a libertação dos ventos.",
                "Etapa III: Deixar uma pequena oferenda simbólica ao vento, como uma flor ou folha seca.",
            ],
            ["Britannica – Pazuzu", "Dictionnaire Infernal (Collin de Plancy, 1818)"],
        ),
        _entity(
            "lamashtu", "Lamashtu", "Mesopotâmica",
            ["mood_swings", "aversion_symbols", "unexplained_fatigue"],
            "Figura feminina monstruosa, metade leoa e metade humana, associada ao medo e às "
            "mudanças emocionais das noites antigas.",
            [
                "Etapa I: Acender uma vela e mentalizar proteção e equilíbrio.",
                "Etapa II: Colocar um copo d’água ao lado da cama antes de dormir.",
                "Etapa III: Descartar essa água pela manhã, simbolizando o fim da influência de Lamashtu.",
            ],
            ["Met Museum – Amuletos de Lamashtu", "Harvard Library Bulletin – Demonologia Mesopotâmica"],
            genders=[SEX_FEMALE],
            age_groups=[AGE_ADULT, AGE_ELDER],
        ),
        _entity(
            "legiao", "Legião", "Cristã",
            ["voice_shift", "aversion_symbols", "mood_swings", "persistent_whispers"],
            "Entidade coletiva mencionada no Novo Testamento — 'somos muitos' — símbolo de vozes "
            "internas conflitantes e desordem emocional.",
            [
                "Etapa I: Fazer silêncio por alguns minutos e respirar profundamente.",
                "Etapa II: Falar em voz alta uma frase afirmativa: 'Eu sou um só, em equilíbrio'.",
                "Etapa III: Lavar as mãos e rosto, simbolizando purificação e retorno à unidade.",
            ],
            ["Evangelho de Marcos 5:1–20", "Comentário Bíblico NCEC – Legião e simbolismo coletivo"],
            genders=[SEX_MALE],
        ),
        _entity(
            "beelzebub", "Beelzebub", "Cristã Ocidental",
            ["aversion_symbols", "mood_swings", "object_movement", "unusual_strength"],
            "Figura demoníaca clássica, associada à decadência e à gula, representando a corrupção "
            "e o orgulho humanos.",
            [
                "Etapa I: Deixar entrar a luz solar por alguns minutos.",
                "Etapa II: Fazer uma limpeza rápida no ambiente.",
                "Etapa III: Acender um incenso ou vela, agradecendo pela harmonia restabelecida.",
            ],
            ["Dictionnaire Infernal (1818)", "Wikipedia – Beelzebub"],
        ),
        _entity(
            "aka_oni", "Aka Oni", "Japonesa",
            ["mood_swings", "aversion_symbols", "temperature_shift", "unusual_strength"],
            "Oni vermelho do folclore japonês, símbolo da raiva e da impulsividade. Representa "
            "emoções que explodem como fogo.",
            [
                "Etapa I: Gritar em um local aberto, liberando simbolicamente a raiva.",
                "Etapa II: Fazer três respirações lentas, visualizando o calor se dissipando.",
                "Etapa III: Beber um copo de água fria para restaurar a calma.",
            ],
            ["Reider, Noriko T. – Japanese Demon Lore", "Kojiki – Mitos do Japão Antigo"],
            genders=[SEX_MALE],
        ),
        _entity(
            "ao_oni", "Ao Oni", "Japonesa",
            ["somnambulism", "mood_swings", "shadow_presence", "time_distortion"],
            "Oni azul, associado à tristeza e ao arrependimento. Move-se silenciosamente durante "
            "a noite, confundindo os sonhadores.",
            [
                "Etapa I: Acender uma luz suave e escrever algo positivo no papel.",
                "Etapa II: Ler em voz alta uma lembrança boa do passado.",
                "Etapa III: Guardar o papel em local tranquilo, simbolizando o descanso do espírito.",
            ],
            ["Yōkai Daizukai – Mizuki Shigeru", "Festival Setsubun – registros culturais"],
            age_groups=[AGE_TEEN],
        ),
        _entity(
            "namahage", "Namahage", "Japonesa (Akita)",
            ["voice_shift", "aversion_symbols", "animal_reaction"],
            "Espírito mascarado que visita casas durante o inverno para assustar crianças "
            "preguiçosas. Na verdade, é um protetor ritualístico.",
            [
                "Etapa I: Tocar um sino ou fazer barulho, como nas festas de inverno.",
                "Etapa II: Limpar a entrada da casa, simbolizando boas-vindas.",
                "Etapa III: Agradecer em voz alta pelo ano que passou.",
            ],
            ["Museu Folclórico de Akita", "Festival Namahage Sedo Matsuri"],
            age_groups=[AGE_CHILD],
        ),
        _entity(
            "ifrit", "Ifrit", "Islâmica",
            ["xenoglossia", "mood_swings", "temperature_shift", "unusual_strength"],
            "Jinn de fogo puro, descrito como poderoso e orgulhoso. Simboliza o controle das "
            "paixões e do orgulho humano.",
            [
                "Etapa I: Ficar em silêncio por um minuto observando uma chama.",
                "Etapa II: Respirar lentamente até sentir calma interior.",
                "Etapa III: Soprar a chama com respeito, representando o domínio sobre o fogo.",
            ],
            ["Al-Jahiz – Kitab al-Hayawan", "Oxford Islamic Studies – Ifrit"],
            age_groups=[AGE_ADULT],
        ),
        _entity(
            "marid", "Marid", "Islâmica",
            ["voice_shift", "mood_swings", "memory_gaps", "time_distortion"],
            "Jinn das águas profundas e das tempestades. Representa emoções presas e desejos não "
            "expressos.",
            [
                "Etapa I: Lavar as mãos e o rosto com água fria, em silêncio.",
                "Etapa II: Ficar próximo a uma fonte ou rio por alguns minutos.",
                "Etapa III: Mentalizar o som da água levando embora preocupações.",
            ],
            ["Kitab al-Bulhan (séc. XIV)", "Qur'an Surata 55 – Ar-Rahman"],
            age_groups=[AGE_ADULT],
        ),
        _entity(
            "ghul", "Ghul", "Islâmica",
            ["somnambulism", "aversion_symbols", "shadow_presence", "object_movement"],
            "Jinn associado a desertos e cemitérios. Gosta de se disfarçar e confundir viajantes. "
            "Símbolo do medo do desconhecido.",
            [
                "Etapa I: Caminhar alguns passos em linha reta, observando atentamente o caminho.",
                "Etapa II: Falar uma frase de coragem em voz alta.",
                "Etapa III: Acender uma lanterna para simbolizar o retorno à clareza.",
            ],
            ["Al-Qazwini – Aja'ib al-Makhluqat", "Encyclopaedia of Islam – Ghul"],
            age_groups=[AGE_ADULT],
        ),
        _entity(
            "silat", "Si’lat", "Islâmica",
            ["xenoglossia", "mood_swings", "mirror_discomfort", "symbolic_drawings"],
            "Jinn sedutor e mutável, famoso por enganar viajantes com aparências belas. "
            "Representa a ilusão e o autoengano.",
            [
                "Etapa I: Olhar-se no espelho e dizer o próprio nome três vezes.",
                "Etapa II: Respirar fundo e sorrir, reconhecendo quem se é de verdade.",
                "Etapa III: Agradecer em voz alta pela autenticidade recuperada.",
            ],
            ["Al-Jahiz – Kitab al-Hayawan", "Oxford Dictionary of Islam – Si’lat"],
            genders=[SEX_FEMALE],
            age_groups=[AGE_ADULT],
        ),
    ]


class EntityCatalog:
    """
    Immutable, read-only set of entity definitions
    Iteration order is the seed order and is relied on for ranking stability
    """

    def __init__(self, entities: Sequence[EntityDefinition]):
        self._entities: Tuple[EntityDefinition, ...] = tuple(entities)
        self._by_id: Dict[str, EntityDefinition] = {e.id: e for e in self._entities}
        logger.info(f"EntityCatalog initialized with {len(self._entities)} entities")

    @classmethod
    def from_samples(cls) -> "EntityCatalog":
        return cls(sample_entities())

    def __len__(self) -> int:
        return len(self._entities)

    def __iter__(self) -> Iterator[EntityDefinition]:
        return iter(self._entities)

    def __contains__(self, entity_id: object) -> bool:
        return entity_id in self._by_id

    def get_all(self) -> Tuple[EntityDefinition, ...]:
        return self._entities

    def get(self, entity_id: str) -> Optional[EntityDefinition]:
        return self._by_id.get(entity_id)

    def ids(self) -> List[str]:
        return [e.id for e in self._entities]

    def trait_vocabulary(self) -> List[str]:
        """All trait tags declared by any entity, in first-seen order"""
        seen: Dict[str, None] = {}
        for entity in self._entities:
            for trait in entity.traits:
                seen.setdefault(trait, None)
        return list(seen)


_catalog: Optional[EntityCatalog] = None


def get_catalog() -> EntityCatalog:
    """Get process-wide catalog built from the seed list (singleton)"""
    global _catalog
    if _catalog is None:
        _catalog = EntityCatalog.from_samples()
    return _catalog
