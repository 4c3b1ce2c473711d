"""Field guide bird cards, unlocked in catalog order as XP accumulates."""

from dataclasses import dataclass


@dataclass(frozen=True, slots=True)
class Reward:
    id: str
    common: str
    sci: str
    badge: str
    fun: str

    def to_dict(self) -> dict:
        return {
            'id': self.id,
            'common': self.common,
            'sci': self.sci,
            'badge': self.badge,
            'fun': self.fun
        }


REWARD_CATALOG = (
    Reward('robin', 'American Robin', 'Turdus migratorius', 'Backyard Lifer',
           'Turdus is Latin for thrush; migratorius is the wanderer.'),
    Reward('cardinal', 'Northern Cardinal', 'Cardinalis cardinalis', 'Red Alert',
           'Named for the red robes of church cardinals, from cardo, "hinge".'),
    Reward('barn-owl', 'Barn Owl', 'Tyto alba', 'Night Shift',
           'Alba means white, the same root as "album" and "albino".'),
    Reward('bald-eagle', 'Bald Eagle', 'Haliaeetus leucocephalus', 'Sky Boss',
           'Greek for "sea eagle, white head", dressed in Latin endings.'),
    Reward('hummingbird', 'Ruby-throated Hummingbird', 'Archilochus colubris', 'Speed Demon',
           'It beats its wings about 53 times per second. Celer indeed.'),
    Reward('mallard', 'Mallard', 'Anas platyrhynchos', 'Pond Regular',
           'Anas is simply Latin for duck.'),
    Reward('heron', 'Great Blue Heron', 'Ardea herodias', 'Patient Hunter',
           'Ardea is the Latin word for heron.'),
    Reward('kingfisher', 'Belted Kingfisher', 'Megaceryle alcyon', 'Dive Master',
           'Alcyon recalls Alcyone, turned into a kingfisher in Ovid.'),
    Reward('peregrine', 'Peregrine Falcon', 'Falco peregrinus', 'Legendary',
           'Peregrinus means wanderer or foreigner; falco is the sickle-shaped claw.'),
)
